"""Pull operation: update an existing working copy."""

from .base import Operation
from .classifier import classify_pull_output
from ..core.types import GitOutput, LocalRepository, OperationOutcome, OutcomeKind
from ..utils.git import pull_repo


class PullOperation(Operation[LocalRepository]):
    """Run ``git pull`` inside a local working copy."""

    name = "pull"
    error_kind = OutcomeKind.PULL_ERROR

    def repo_name(self, target: LocalRepository) -> str:
        return target.name

    def run(self, target: LocalRepository) -> GitOutput:
        return pull_repo(target.path, timeout=self.timeout)

    def classify(self, repo_name: str, output: GitOutput) -> OperationOutcome:
        return classify_pull_output(repo_name, output)
