"""Base classes for repository operations."""

import logging
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from ..core.types import GitOutput, OperationOutcome, OutcomeKind

logger = logging.getLogger('reposync')

T = TypeVar('T')


class Operation(ABC, Generic[T]):
    """One git invocation against one repository.

    Subclasses run the subprocess and classify its output. ``execute``
    never raises: anything unexpected becomes the operation's error outcome
    so that sibling tasks are never affected.
    """

    # Class attributes to be overridden by subclasses
    name: str = "base"
    error_kind: OutcomeKind

    def __init__(self, repo_root_dir: str, timeout: Optional[float] = None):
        """Initialize operation.

        Args:
            repo_root_dir: Directory holding all working copies
            timeout: Optional git timeout in seconds
        """
        self.repo_root_dir = repo_root_dir
        self.timeout = timeout

    @abstractmethod
    def repo_name(self, target: T) -> str:
        """Name reported for the target repository."""

    @abstractmethod
    def run(self, target: T) -> GitOutput:
        """Run git for the target repository."""

    @abstractmethod
    def classify(self, repo_name: str, output: GitOutput) -> OperationOutcome:
        """Turn raw git output into an outcome."""

    def execute(self, target: T) -> OperationOutcome:
        """Execute the operation on a repository.

        Args:
            target: Repository to operate on

        Returns:
            Classified outcome
        """
        repo_name = self.repo_name(target)
        try:
            output = self.run(target)
            outcome = self.classify(repo_name, output)
        except Exception as e:
            logger.error(f"Unexpected error during {self.name} of {repo_name}: {e}", exc_info=True)
            return OperationOutcome(
                repo_name=repo_name,
                kind=self.error_kind,
                detail=f"Unexpected error: {e}"
            )

        self._log_outcome(outcome)
        return outcome

    def _log_outcome(self, outcome: OperationOutcome) -> None:
        if outcome.failed:
            logger.error(f"✗ {outcome.repo_name}: {self.name} failed: {outcome.detail}")
        else:
            logger.info(f"✓ {outcome.repo_name}: {outcome.kind.value}")
