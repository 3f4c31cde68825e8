"""Aggregation of operation outcomes into the final sync report."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from ..core.types import OperationOutcome, OutcomeKind, Reconciliation, RemoteRepository

logger = logging.getLogger('reposync')

GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"
RESET = "\x1b[0m"


def _empty_buckets() -> Dict[OutcomeKind, List[OperationOutcome]]:
    return {kind: [] for kind in OutcomeKind}


@dataclass
class SyncReport:
    """Outcomes grouped by kind, plus archived repositories still on disk.

    Every OutcomeKind has a bucket, empty or not. Buckets keep the order in
    which outcomes were added.
    """
    buckets: Dict[OutcomeKind, List[OperationOutcome]] = field(default_factory=_empty_buckets)
    archived: List[RemoteRepository] = field(default_factory=list)

    def bucket(self, kind: OutcomeKind) -> List[OperationOutcome]:
        """Get outcomes of one kind."""
        return self.buckets[kind]

    @property
    def pull_noop_count(self) -> int:
        return len(self.buckets[OutcomeKind.PULL_NOOP])

    @property
    def has_errors(self) -> bool:
        """Check if any clone or pull failed."""
        return any(self.buckets[kind] for kind in OutcomeKind if kind.is_error)

    @property
    def total(self) -> int:
        return sum(len(outcomes) for outcomes in self.buckets.values())


def aggregate(
    outcomes: Iterable[OperationOutcome],
    archived: Iterable[RemoteRepository] = ()
) -> SyncReport:
    """Fold finished outcomes into a report.

    Args:
        outcomes: Outcomes of every joined task, in submission order
        archived: Archived team repositories that still have a working copy

    Returns:
        SyncReport with one bucket per OutcomeKind
    """
    report = SyncReport(archived=list(archived))
    for outcome in outcomes:
        report.buckets[outcome.kind].append(outcome)

    logger.info(
        f"Sync finished: {report.total} operations, "
        + ", ".join(f"{kind.value}={len(report.buckets[kind])}" for kind in OutcomeKind)
        + f", archived={len(report.archived)}"
    )
    return report


def _paint(text: str, color: str, use_color: bool) -> str:
    return f"{color}{text}{RESET}" if use_color else text


def render_report(report: SyncReport, use_color: bool = False) -> str:
    """Render the report as text.

    Layout: no-op count, then updated, cloned, archived, clone failures and
    pull failures, one line per repository. Failure details follow their
    repository line, indented by two spaces.

    Args:
        report: Aggregated report
        use_color: Wrap names in ANSI colors

    Returns:
        Report text without trailing newline
    """
    lines = [f"{_paint('Pull no-op count', GREEN, use_color)}: {report.pull_noop_count}"]

    for outcome in report.bucket(OutcomeKind.UPDATED):
        lines.append(f"{_paint(outcome.repo_name, YELLOW, use_color)}: updated")
    for outcome in report.bucket(OutcomeKind.CLONED):
        lines.append(f"{_paint(outcome.repo_name, YELLOW, use_color)}: cloned")
    for repo in report.archived:
        lines.append(f"{_paint(repo.name, YELLOW, use_color)}: archived")

    for kind, verb in ((OutcomeKind.CLONE_ERROR, "clone"), (OutcomeKind.PULL_ERROR, "pull")):
        for outcome in report.bucket(kind):
            lines.append(f"{_paint(outcome.repo_name, RED, use_color)}: failed to {verb}:")
            lines.extend(f"  {line}" for line in outcome.detail.splitlines())

    return "\n".join(lines)


def render_plan(plan: Reconciliation) -> str:
    """Render what a sync would do, without running git."""
    lines = [f"{repo.name}: would pull" for repo in plan.existing_repos]
    lines.extend(f"{repo.name}: would clone" for repo in plan.new_repos)
    lines.extend(f"{repo.name}: archived" for repo in plan.archived_local_repos)
    if not lines:
        lines.append("Nothing to do")
    return "\n".join(lines)


def print_summary(report: SyncReport, use_color: bool = False) -> None:
    """Print the sync report to stdout."""
    print(render_report(report, use_color=use_color))
