"""Git subprocess wrappers and local working copy discovery."""

import os
import subprocess
import logging
from typing import List, Optional, Sequence

from ..core.types import GitOutput, LocalRepository

logger = logging.getLogger('reposync')

GIT_EXECUTABLE = "git"


def run_git(
    args: Sequence[str],
    cwd: str,
    timeout: Optional[float] = None
) -> GitOutput:
    """Run a git command and capture its output.

    Args:
        args: Arguments passed to git
        cwd: Working directory for the subprocess
        timeout: Optional timeout in seconds (None = wait forever)

    Returns:
        GitOutput with exit status and captured text. Failures to start
        the process are reported through ``exec_error`` instead of raising.
    """
    command = [GIT_EXECUTABLE, *args]
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
            timeout=timeout
        )
    except OSError as e:
        logger.error(f"Could not run {' '.join(command)} in {cwd}: {e}")
        return GitOutput(returncode=None, exec_error=str(e))
    except subprocess.TimeoutExpired:
        logger.error(f"Timed out after {timeout}s: {' '.join(command)} in {cwd}")
        return GitOutput(
            returncode=None,
            exec_error=f"git {' '.join(args)} timed out after {timeout}s"
        )

    return GitOutput(
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or ""
    )


def clone_repo(
    clone_url: str,
    repo_root_dir: str,
    dir_name: str,
    timeout: Optional[float] = None
) -> GitOutput:
    """Clone a repository into ``repo_root_dir/dir_name``.

    Args:
        clone_url: URL to clone from
        repo_root_dir: Directory the clone runs in
        dir_name: Name of the new working copy directory

    Returns:
        Raw git output
    """
    logger.info(f"Cloning {clone_url} into {os.path.join(repo_root_dir, dir_name)}...")
    return run_git(["clone", clone_url, dir_name], cwd=repo_root_dir, timeout=timeout)


def pull_repo(repo_path: str, timeout: Optional[float] = None) -> GitOutput:
    """Pull latest changes for a working copy.

    Args:
        repo_path: Path to the working copy

    Returns:
        Raw git output
    """
    logger.info(f"Pulling {repo_path}...")
    return run_git(["pull"], cwd=repo_path, timeout=timeout)


def is_git_repo(path: str) -> bool:
    """Check if a directory directly contains a ``.git`` entry.

    Args:
        path: Directory to check

    Returns:
        True if ``path/.git`` exists (directory or gitfile)
    """
    try:
        with os.scandir(path) as entries:
            return any(entry.name == ".git" for entry in entries)
    except OSError:
        return False


def list_local_repos(repo_root_dir: str) -> List[LocalRepository]:
    """List working copies that are immediate children of a root directory.

    Only one level is scanned. The result follows filesystem enumeration
    order.

    Args:
        repo_root_dir: Directory holding all working copies

    Returns:
        List of local repositories, empty if the root can't be read
    """
    repos = []
    try:
        with os.scandir(repo_root_dir) as entries:
            for entry in entries:
                try:
                    if not entry.is_dir():
                        continue
                except OSError:
                    continue
                if is_git_repo(entry.path):
                    repos.append(LocalRepository(name=entry.name, path=entry.path))
    except OSError as e:
        logger.warning(f"Could not read repository root {repo_root_dir}: {e}")
        return []

    logger.info(f"Found {len(repos)} local repositories in {repo_root_dir}")
    return repos
