"""Core types shared by inventory, reconciliation and execution."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class OutcomeKind(Enum):
    """Classified result of a single clone or pull invocation."""
    CLONED = "cloned"
    UPDATED = "updated"
    PULL_NOOP = "pull_noop"
    CLONE_ERROR = "clone_error"
    PULL_ERROR = "pull_error"

    @property
    def is_error(self) -> bool:
        """Check if this kind represents a failed operation."""
        return self in (OutcomeKind.CLONE_ERROR, OutcomeKind.PULL_ERROR)


@dataclass(frozen=True)
class RemoteRepository:
    """Repository as listed by the team repository endpoint."""
    name: str
    archived: bool
    clone_url: str


@dataclass(frozen=True)
class LocalRepository:
    """Git working copy found directly under the repository root."""
    name: str
    path: str


@dataclass(frozen=True)
class GitOutput:
    """Raw result of one git subprocess invocation.

    ``exec_error`` is set when the process could not be started at all;
    in that case ``returncode`` is None and both streams are empty.
    """
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    exec_error: Optional[str] = None

    @property
    def started(self) -> bool:
        """Check if the subprocess actually ran."""
        return self.exec_error is None


@dataclass(frozen=True)
class OperationOutcome:
    """Classified result of one repository operation."""
    repo_name: str
    kind: OutcomeKind
    detail: str = ""

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return self.kind.is_error


@dataclass(frozen=True)
class Reconciliation:
    """Three-way diff between remote and local repositories."""
    new_repos: List[RemoteRepository] = field(default_factory=list)
    existing_repos: List[LocalRepository] = field(default_factory=list)
    archived_local_repos: List[RemoteRepository] = field(default_factory=list)
