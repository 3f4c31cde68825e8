"""Clone operation: clone a team repository that has no working copy yet."""

from .base import Operation
from .classifier import classify_clone_output
from ..core.reconciler import strip_prefix
from ..core.types import GitOutput, OperationOutcome, OutcomeKind, RemoteRepository
from ..utils.git import clone_repo


class CloneOperation(Operation[RemoteRepository]):
    """Clone a remote repository into ``<root>/<name without team prefix>``."""

    name = "clone"
    error_kind = OutcomeKind.CLONE_ERROR

    def __init__(self, repo_root_dir: str, team_prefix: str = "", **kwargs):
        """Initialize clone operation.

        Args:
            repo_root_dir: Directory the clone runs in
            team_prefix: Prefix stripped from the directory name
            **kwargs: Passed to Operation
        """
        super().__init__(repo_root_dir, **kwargs)
        self.team_prefix = team_prefix

    def repo_name(self, target: RemoteRepository) -> str:
        return target.name

    def dir_name(self, target: RemoteRepository) -> str:
        """Directory name of the new working copy."""
        return strip_prefix(target.name, self.team_prefix)

    def run(self, target: RemoteRepository) -> GitOutput:
        return clone_repo(
            target.clone_url,
            self.repo_root_dir,
            self.dir_name(target),
            timeout=self.timeout
        )

    def classify(self, repo_name: str, output: GitOutput) -> OperationOutcome:
        return classify_clone_output(repo_name, output)
