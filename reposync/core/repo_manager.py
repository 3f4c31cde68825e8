"""Repository manager for orchestrating a sync run."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from .github_client import GitHubClient, filter_active_repos, filter_archived_repos
from .reconciler import reconcile
from .types import LocalRepository, OperationOutcome, Reconciliation
from ..operations.base import Operation
from ..operations.clone import CloneOperation
from ..operations.pull import PullOperation
from ..utils.git import list_local_repos
from ..utils.report import SyncReport, aggregate

logger = logging.getLogger('reposync')


class RepoManager:
    """Manager for orchestrating clone and pull operations."""

    def __init__(
        self,
        github_client: GitHubClient,
        repo_root_dir: str,
        team_prefix: str = "",
        max_workers: Optional[int] = None,
        git_timeout: Optional[float] = None
    ):
        """Initialize repository manager.

        Args:
            github_client: GitHub API client
            repo_root_dir: Directory holding all working copies
            team_prefix: Prefix stripped from remote names
            max_workers: Cap on parallel git processes per pool
                (None = one worker per repository)
            git_timeout: Optional timeout for each git invocation
        """
        self.github_client = github_client
        self.repo_root_dir = repo_root_dir
        self.team_prefix = team_prefix
        self.max_workers = max_workers
        self.pull_operation = PullOperation(repo_root_dir, timeout=git_timeout)
        self.clone_operation = CloneOperation(repo_root_dir, team_prefix=team_prefix, timeout=git_timeout)

    def _pool_size(self, task_count: int) -> int:
        size = max(task_count, 1)
        if self.max_workers is not None:
            size = min(size, self.max_workers)
        return size

    def fetch_plan(self, local_repos: Sequence[LocalRepository]) -> Reconciliation:
        """Fetch team repositories and diff them against local working copies.

        Args:
            local_repos: Working copies found under the root

        Returns:
            Reconciliation of remote and local repositories
        """
        logger.info("Looking for team repositories...")
        remote_repos = self.github_client.get_repos()
        return reconcile(
            filter_active_repos(remote_repos, self.team_prefix),
            filter_archived_repos(remote_repos, self.team_prefix),
            local_repos,
            self.team_prefix
        )

    def plan(self) -> Reconciliation:
        """Compute what a sync would do without running git."""
        return self.fetch_plan(list_local_repos(self.repo_root_dir))

    def sync(self) -> SyncReport:
        """Pull every local working copy and clone every new team repository.

        Pulls start as soon as the local scan is done, while the team
        repositories are still being fetched. All tasks are joined before
        the report is built.

        Returns:
            Aggregated report
        """
        logger.info("Gathering local repositories...")
        local_repos = list_local_repos(self.repo_root_dir)

        pull_pool = ThreadPoolExecutor(
            max_workers=self._pool_size(len(local_repos)),
            thread_name_prefix="pull"
        )
        with pull_pool:
            logger.info(f"Pulling {len(local_repos)} repositories...")
            pull_futures = self._submit(pull_pool, self.pull_operation, local_repos)

            plan = self.fetch_plan(local_repos)

            clone_pool = ThreadPoolExecutor(
                max_workers=self._pool_size(len(plan.new_repos)),
                thread_name_prefix="clone"
            )
            with clone_pool:
                logger.info(f"Cloning {len(plan.new_repos)} repositories...")
                clone_futures = self._submit(clone_pool, self.clone_operation, plan.new_repos)
                outcomes = self._join(pull_futures + clone_futures)

        for repo in plan.archived_local_repos:
            logger.info(f"{repo.name} is archived but still present locally")

        return aggregate(outcomes, plan.archived_local_repos)

    def _submit(
        self,
        pool: ThreadPoolExecutor,
        operation: Operation,
        targets: Sequence
    ) -> List[Tuple[str, Operation, Future]]:
        return [
            (operation.repo_name(target), operation, pool.submit(operation.execute, target))
            for target in targets
        ]

    def _join(self, futures) -> List[OperationOutcome]:
        """Wait for every task, in submission order."""
        outcomes = []
        for repo_name, operation, future in futures:
            try:
                outcomes.append(future.result())
            except Exception as e:
                logger.error(f"Unexpected error processing {repo_name}: {e}")
                outcomes.append(OperationOutcome(
                    repo_name=repo_name,
                    kind=operation.error_kind,
                    detail=f"Unexpected error: {e}"
                ))
        return outcomes
