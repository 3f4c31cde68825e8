"""Three-way diff between team repositories and local working copies.

Every comparison goes through :func:`strip_prefix`, so a remote repository
``team_foo`` and a local directory ``foo`` are the same repository when the
team prefix is ``team_``.
"""

import logging
from typing import Iterable, List, Set

from .types import LocalRepository, Reconciliation, RemoteRepository

logger = logging.getLogger('reposync')


def strip_prefix(name: str, team_prefix: str) -> str:
    """Get the local directory name for a remote repository name."""
    if team_prefix and name.startswith(team_prefix):
        return name[len(team_prefix):]
    return name


def _local_names(local_repos: Iterable[LocalRepository]) -> Set[str]:
    return {repo.name for repo in local_repos}


def _unique(remote_repos: Iterable[RemoteRepository]) -> List[RemoteRepository]:
    seen = set()
    unique = []
    for repo in remote_repos:
        if repo.name in seen:
            continue
        seen.add(repo.name)
        unique.append(repo)
    return unique


def is_known_repo(
    remote_repo: RemoteRepository,
    local_repos: Iterable[LocalRepository],
    team_prefix: str
) -> bool:
    """Check if a remote repository already has a local working copy."""
    return strip_prefix(remote_repo.name, team_prefix) in _local_names(local_repos)


def find_new_repos(
    active_repos: Iterable[RemoteRepository],
    local_repos: Iterable[LocalRepository],
    team_prefix: str
) -> List[RemoteRepository]:
    """Active team repositories without a local working copy."""
    local_names = _local_names(local_repos)
    return [
        repo for repo in _unique(active_repos)
        if strip_prefix(repo.name, team_prefix) not in local_names
    ]


def find_existing_repos(local_repos: Iterable[LocalRepository]) -> List[LocalRepository]:
    """Local working copies to pull.

    Every working copy is pulled, whether or not it maps to an active
    team repository.
    """
    return list(local_repos)


def find_archived_local_repos(
    archived_repos: Iterable[RemoteRepository],
    local_repos: Iterable[LocalRepository],
    team_prefix: str
) -> List[RemoteRepository]:
    """Archived team repositories that still have a local working copy."""
    local_names = _local_names(local_repos)
    return [
        repo for repo in _unique(archived_repos)
        if strip_prefix(repo.name, team_prefix) in local_names
    ]


def reconcile(
    active_repos: Iterable[RemoteRepository],
    archived_repos: Iterable[RemoteRepository],
    local_repos: Iterable[LocalRepository],
    team_prefix: str
) -> Reconciliation:
    """Compute new, existing and archived-but-local repositories.

    Args:
        active_repos: Non-archived team repositories
        archived_repos: Archived team repositories
        local_repos: Working copies found under the repository root
        team_prefix: Prefix stripped from remote names

    Returns:
        Reconciliation with the three repository lists
    """
    local_repos = list(local_repos)
    result = Reconciliation(
        new_repos=find_new_repos(active_repos, local_repos, team_prefix),
        existing_repos=find_existing_repos(local_repos),
        archived_local_repos=find_archived_local_repos(archived_repos, local_repos, team_prefix),
    )
    logger.info(
        f"Reconciled: {len(result.new_repos)} new, "
        f"{len(result.existing_repos)} existing, "
        f"{len(result.archived_local_repos)} archived but local"
    )
    return result
