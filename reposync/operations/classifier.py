"""Classification of git clone/pull output into outcome kinds.

git has no structured "nothing changed" signal for ``git pull``, so the
decision is made from the human readable text it prints. The phrases live
in the pattern tables below; supporting a new git wording means adding a
row, not touching the control flow.

Pull precedence (first match wins):

1. the process could not be started               -> PULL_ERROR
2. a known failure phrase on either stream        -> PULL_ERROR
3. a stderr line that is not a known benign line  -> PULL_ERROR
   (multi-line notices are removed first)
4. a non-zero exit status                         -> PULL_ERROR
5. an "up to date" phrase, or only new tags       -> PULL_NOOP
6. anything else                                  -> UPDATED

Unrecognized text ends up as UPDATED: reporting a change that did not
happen is preferable to hiding one that did.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from ..core.types import GitOutput, OperationOutcome, OutcomeKind


@dataclass(frozen=True)
class TextPattern:
    """Named regular expression matched against git output."""
    name: str
    regex: Pattern

    def search(self, text: str) -> bool:
        return self.regex.search(text) is not None

    def remove(self, text: str) -> str:
        return self.regex.sub("", text)


def _pattern(name: str, expression: str, flags: int = 0) -> TextPattern:
    return TextPattern(name, re.compile(expression, re.IGNORECASE | re.MULTILINE | flags))


# Always a failure, whatever the exit status.
PULL_ERROR_PATTERNS: Tuple[TextPattern, ...] = (
    _pattern("fatal", r"^fatal:"),
    _pattern("error", r"^error:"),
    _pattern("merge_conflict", r"^CONFLICT\b"),
    _pattern("merge_failed", r"Automatic merge failed"),
    _pattern("unmerged_files", r"you have unmerged files"),
    _pattern("autostash_conflict", r"Applying autostash resulted in conflicts"),
    _pattern("repository_not_found", r"repository .*not found"),
    _pattern("aborting", r"^Aborting\b"),
    _pattern("rebase_stopped", r"could not apply"),
)

# Matched line by line against stderr; any other stderr line is a failure.
BENIGN_STDERR_PATTERNS: Tuple[TextPattern, ...] = (
    _pattern("fetch_source", r"^From\s+\S+"),
    _pattern("ref_update", r"^\s*[0-9a-f]+\.{2,3}[0-9a-f]+\s+\S+\s+->\s+\S+"),
    _pattern("new_ref", r"^\s*\*\s+\[new (tag|branch|ref)\]"),
    _pattern("forced_update", r"^\s*\+\s+[0-9a-f]+\.\.\.[0-9a-f]+\s+.*\(forced update\)"),
    _pattern("tag_update", r"^\s*t\s+\[tag update\]"),
    _pattern("pruned_ref", r"^\s*-\s+\[deleted\]"),
    _pattern("rebase_success", r"^Successfully rebased and updated"),
    _pattern("autostash_created", r"^Created autostash:"),
    _pattern("autostash_applied", r"^Applied autostash\.?$"),
    _pattern("hint", r"^hint:"),
    _pattern("auto_gc", r"^Auto packing the repository\b"),
    _pattern("auto_gc_help", r"^See \"git help gc\" for manual housekeeping"),
)

# Multi-line stderr notices, removed whole before the line by line check.
BENIGN_STDERR_BLOCKS: Tuple[TextPattern, ...] = (
    # git 2.27 to 2.32, printed when pull.rebase is unset
    _pattern(
        "reconcile_warning",
        r"^warning: Pulling without specifying how to reconcile divergent branches is\b.*?^invocation\.[ \t]*$",
        re.DOTALL,
    ),
    _pattern(
        "auto_gc_legacy",
        r"^Auto packing the repository for optimum performance\. You may also\s*\n"
        r"\s*run \"git gc\" manually\. See \"git help gc\" for more information\.[ \t]*$",
    ),
)

# Matched against stdout; "nothing changed".
NO_OP_PATTERNS: Tuple[TextPattern, ...] = (
    _pattern("already_up_to_date", r"already up[ -]to[ -]date"),
    _pattern("is_up_to_date", r"is up[ -]to[ -]date"),
)

# Lines that only announce fetched tags.
TAG_PATTERNS: Tuple[TextPattern, ...] = (
    _pattern("new_tag", r"^\s*\*\s+\[new tag\]"),
    _pattern("tag_update", r"^\s*t\s+\[tag update\]"),
)
TAG_ONLY_PATTERNS: Tuple[TextPattern, ...] = (
    _pattern("fetch_source", r"^From\s+\S+"),
) + TAG_PATTERNS


def _lines(text: str):
    return [line for line in text.splitlines() if line.strip()]


def find_match(patterns: Tuple[TextPattern, ...], text: str) -> Optional[TextPattern]:
    """Return the first pattern found in text, if any."""
    for pattern in patterns:
        if pattern.search(text):
            return pattern
    return None


def strip_benign_blocks(stderr: str) -> str:
    """Remove known multi-line notices from stderr."""
    for block in BENIGN_STDERR_BLOCKS:
        stderr = block.remove(stderr)
    return stderr


def is_benign_stderr(stderr: str) -> bool:
    """Check if every stderr line is a known informational line."""
    lines = _lines(strip_benign_blocks(stderr))
    return all(find_match(BENIGN_STDERR_PATTERNS, line) for line in lines)


def is_tag_only(stdout: str) -> bool:
    """Check if stdout only announces new tags."""
    lines = _lines(stdout)
    if not lines:
        return False
    if not any(find_match(TAG_PATTERNS, line) for line in lines):
        return False
    return all(find_match(TAG_ONLY_PATTERNS, line) for line in lines)


def classify_pull(
    stdout: str,
    stderr: str,
    exec_error: Optional[str] = None,
    returncode: Optional[int] = 0
) -> OutcomeKind:
    """Classify the output of ``git pull``."""
    stdout = (stdout or "").strip()
    stderr = (stderr or "").strip()

    if exec_error is not None:
        return OutcomeKind.PULL_ERROR
    if find_match(PULL_ERROR_PATTERNS, stderr) or find_match(PULL_ERROR_PATTERNS, stdout):
        return OutcomeKind.PULL_ERROR
    if stderr and not is_benign_stderr(stderr):
        return OutcomeKind.PULL_ERROR
    if returncode not in (0, None):
        return OutcomeKind.PULL_ERROR
    if find_match(NO_OP_PATTERNS, stdout) or is_tag_only(stdout):
        return OutcomeKind.PULL_NOOP
    return OutcomeKind.UPDATED


def classify_clone(
    stdout: str,
    stderr: str,
    exec_error: Optional[str] = None,
    returncode: Optional[int] = 0
) -> OutcomeKind:
    """Classify the output of ``git clone``.

    git clone reports progress on stderr even on success, so only the
    exit status decides.
    """
    if exec_error is not None or returncode != 0:
        return OutcomeKind.CLONE_ERROR
    return OutcomeKind.CLONED


def _detail(kind: OutcomeKind, output: GitOutput) -> str:
    stdout = (output.stdout or "").strip()
    stderr = (output.stderr or "").strip()
    if not output.started:
        return output.exec_error
    if kind.is_error:
        return stderr or stdout
    if kind == OutcomeKind.UPDATED:
        return stdout
    return ""


def classify_pull_output(repo_name: str, output: GitOutput) -> OperationOutcome:
    """Build the outcome of a finished pull."""
    kind = classify_pull(output.stdout, output.stderr, output.exec_error, output.returncode)
    return OperationOutcome(repo_name=repo_name, kind=kind, detail=_detail(kind, output))


def classify_clone_output(repo_name: str, output: GitOutput) -> OperationOutcome:
    """Build the outcome of a finished clone."""
    kind = classify_clone(output.stdout, output.stderr, output.exec_error, output.returncode)
    return OperationOutcome(repo_name=repo_name, kind=kind, detail=_detail(kind, output))
