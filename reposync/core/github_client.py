"""GitHub API client for listing team repositories."""

import logging
import requests
from typing import List, Dict, Any, Optional

from .types import RemoteRepository

logger = logging.getLogger('reposync')

PER_PAGE = 100

PAGINATION_RAW = "raw"
PAGINATION_FILTERED = "filtered"
PAGINATION_POLICIES = (PAGINATION_RAW, PAGINATION_FILTERED)

CLONE_PROTOCOLS = ("https", "ssh")


def filter_active_repos(
    repos: List[RemoteRepository],
    team_prefix: str
) -> List[RemoteRepository]:
    """Keep non-archived repositories whose name starts with the team prefix."""
    return [r for r in repos if not r.archived and r.name.startswith(team_prefix)]


def filter_archived_repos(
    repos: List[RemoteRepository],
    team_prefix: str
) -> List[RemoteRepository]:
    """Keep archived repositories whose name starts with the team prefix."""
    return [r for r in repos if r.archived and r.name.startswith(team_prefix)]


class GitHubClient:
    """Client for the GitHub team repositories endpoint."""

    def __init__(
        self,
        team_repos_url: str,
        token: str,
        team_prefix: str = "",
        clone_protocol: str = "https",
        pagination: str = PAGINATION_RAW,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """Initialize GitHub client.

        Args:
            team_repos_url: Team repository list URL, e.g.
                https://api.github.com/organizations/<org_id>/team/<team_id>/repos
            token: GitHub token allowed to list the team repositories
            team_prefix: Repository name prefix shared by the team
            clone_protocol: 'https' or 'ssh', selects the preferred clone URL
            pagination: 'raw' stops at the first empty page returned by GitHub,
                'filtered' stops at the first page with no active team repo
            timeout: Per-request timeout in seconds
            session: Optional requests session (mainly for tests)
        """
        if clone_protocol not in CLONE_PROTOCOLS:
            raise ValueError(f"Unknown clone protocol: {clone_protocol}")
        if pagination not in PAGINATION_POLICIES:
            raise ValueError(f"Unknown pagination policy: {pagination}")

        self.team_repos_url = team_repos_url
        self.team_prefix = team_prefix
        self.clone_protocol = clone_protocol
        self.pagination = pagination
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'reposync',
            'Authorization': f'Bearer {token}',
        }

    def get_page(self, page: int) -> Optional[List[Dict[str, Any]]]:
        """Fetch a single page of team repositories.

        Args:
            page: 1-based page number

        Returns:
            Raw repository dictionaries on the page, or None if the request
            or decoding failed
        """
        params = {'per_page': PER_PAGE, 'page': page}
        try:
            response = self.session.get(
                self.team_repos_url,
                headers=self.headers,
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.warning(f"Failed to get team repositories (page {page}): {e}")
            return None
        except ValueError as e:
            logger.warning(f"Invalid JSON in team repositories (page {page}): {e}")
            return None

        if not isinstance(payload, list):
            logger.warning(f"Unexpected payload for team repositories (page {page}): expected a list")
            return None

        return payload

    def get_repos(self) -> List[RemoteRepository]:
        """Get every repository visible through the team endpoint.

        Pages are requested one after another. Any failing page ends
        pagination; repositories gathered so far are kept.

        Returns:
            List of repositories, archived ones included
        """
        all_repos: List[RemoteRepository] = []
        page = 1

        while True:
            payload = self.get_page(page)
            if not payload:
                break

            repos_page = [
                repo for repo in map(self._map_repository, payload)
                if repo is not None
            ]
            all_repos.extend(repos_page)

            if (self.pagination == PAGINATION_FILTERED and
                    not filter_active_repos(repos_page, self.team_prefix)):
                # A page without active team repos is the last one. A later
                # page may still hold matches; see DESIGN.md.
                logger.info(f"Page {page} has no active team repositories, stopping")
                break

            page += 1

        logger.info(f"Found {len(all_repos)} repositories")
        return all_repos

    def get_clone_url(self, item: Dict[str, Any]) -> Optional[str]:
        """Pick the clone URL from a repository payload.

        Args:
            item: Repository dictionary from GitHub API

        Returns:
            SSH or HTTPS URL according to the clone protocol, falling back to
            whatever URL the payload carries
        """
        if self.clone_protocol == "ssh":
            keys = ('ssh_url', 'clone_url', 'git_url')
        else:
            keys = ('clone_url', 'ssh_url', 'git_url')
        for key in keys:
            value = item.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    def _map_repository(self, item: Any) -> Optional[RemoteRepository]:
        if not isinstance(item, dict):
            return None
        name = item.get('name')
        if not isinstance(name, str) or not name:
            logger.debug(f"Skipping repository without name: {item!r}")
            return None
        clone_url = self.get_clone_url(item)
        if clone_url is None:
            logger.debug(f"Skipping repository {name}: no clone URL")
            return None
        return RemoteRepository(
            name=name,
            archived=bool(item.get('archived', False)),
            clone_url=clone_url
        )
