import threading
from pathlib import Path
from unittest.mock import MagicMock

from reposync.core.repo_manager import RepoManager
from reposync.core.types import GitOutput, LocalRepository, OutcomeKind, RemoteRepository
from reposync.operations.clone import CloneOperation

PREFIX = "team_"


def make_manager(tmp_path: Path, remote_repos, local_names=(), **kwargs) -> RepoManager:
    for name in local_names:
        (tmp_path / name / ".git").mkdir(parents=True)
    github_client = MagicMock()
    github_client.get_repos.return_value = list(remote_repos)
    return RepoManager(github_client, str(tmp_path), team_prefix=PREFIX, **kwargs)


def remote(name: str, archived: bool = False) -> RemoteRepository:
    return RemoteRepository(name=name, archived=archived, clone_url=f"git@github.com:org/{name}.git")


def test_sync_clones_new_and_pulls_existing(mocker: MagicMock, tmp_path: Path) -> None:
    """Verifies the full fan-out: pulls for local copies, clones for new repos."""
    mock_pull = mocker.patch(
        "reposync.operations.pull.pull_repo",
        return_value=GitOutput(returncode=0, stdout="Already up to date.\n"),
    )
    mock_clone = mocker.patch(
        "reposync.operations.clone.clone_repo",
        return_value=GitOutput(returncode=0, stderr="Cloning into 'alpha'...\n"),
    )
    manager = make_manager(
        tmp_path,
        [remote("team_alpha"), remote("team_beta"), remote("team_delta", archived=True)],
        local_names=["beta", "delta"],
    )

    report = manager.sync()

    mock_clone.assert_called_once_with(
        "git@github.com:org/team_alpha.git", str(tmp_path), "alpha", timeout=None
    )
    assert sorted(call.args[0] for call in mock_pull.call_args_list) == [
        str(tmp_path / "beta"), str(tmp_path / "delta")
    ]
    assert [o.repo_name for o in report.bucket(OutcomeKind.CLONED)] == ["team_alpha"]
    assert sorted(o.repo_name for o in report.bucket(OutcomeKind.PULL_NOOP)) == ["beta", "delta"]
    assert [r.name for r in report.archived] == ["team_delta"]
    assert not report.has_errors


def test_failures_are_isolated_per_repository(mocker: MagicMock, tmp_path: Path) -> None:
    """Verifies that one failing task never affects its siblings."""
    def fake_pull(path, timeout=None):
        if path.endswith("broken"):
            raise RuntimeError("disk on fire")
        if path.endswith("gone"):
            return GitOutput(returncode=None, exec_error="No such file or directory: 'git'")
        return GitOutput(returncode=0, stdout="Fast-forward\n a.txt | 1 +\n")

    mocker.patch("reposync.operations.pull.pull_repo", side_effect=fake_pull)
    mocker.patch(
        "reposync.operations.clone.clone_repo",
        return_value=GitOutput(returncode=128, stderr="fatal: repository not found\n"),
    )
    manager = make_manager(tmp_path, [remote("team_new")], local_names=["broken", "gone", "ok"])

    report = manager.sync()

    assert [o.repo_name for o in report.bucket(OutcomeKind.UPDATED)] == ["ok"]
    errors = {o.repo_name: o.detail for o in report.bucket(OutcomeKind.PULL_ERROR)}
    assert errors["broken"] == "Unexpected error: disk on fire"
    assert errors["gone"] == "No such file or directory: 'git'"
    clone_errors = report.bucket(OutcomeKind.CLONE_ERROR)
    assert [(o.repo_name, o.detail) for o in clone_errors] == [("team_new", "fatal: repository not found")]
    assert report.has_errors


def test_tasks_run_concurrently(mocker: MagicMock, tmp_path: Path) -> None:
    """Verifies that every pull runs in its own worker at the same time."""
    names = ["a", "b", "c", "d"]
    barrier = threading.Barrier(len(names), timeout=10)

    def fake_pull(path, timeout=None):
        barrier.wait()
        return GitOutput(returncode=0, stdout="Already up to date.")

    mocker.patch("reposync.operations.pull.pull_repo", side_effect=fake_pull)
    manager = make_manager(tmp_path, [], local_names=names)

    report = manager.sync()

    assert report.pull_noop_count == len(names)


def test_pulls_start_before_remote_inventory(mocker: MagicMock, tmp_path: Path) -> None:
    """Verifies that pulls are not held back by the GitHub request."""
    pulled = threading.Event()

    def fake_pull(path, timeout=None):
        pulled.set()
        return GitOutput(returncode=0, stdout="Already up to date.")

    mocker.patch("reposync.operations.pull.pull_repo", side_effect=fake_pull)
    manager = make_manager(tmp_path, [], local_names=["a"])

    def slow_get_repos():
        assert pulled.wait(timeout=10)
        return []

    manager.github_client.get_repos.side_effect = slow_get_repos

    report = manager.sync()

    assert report.pull_noop_count == 1


def test_outcomes_keep_submission_order(mocker: MagicMock, tmp_path: Path) -> None:
    """Verifies that report order follows the local scan and remote order."""
    mocker.patch(
        "reposync.operations.pull.pull_repo",
        return_value=GitOutput(returncode=0, stdout="Updating 1..2\nFast-forward"),
    )
    mocker.patch("reposync.operations.clone.clone_repo", return_value=GitOutput(returncode=0))
    local_repos = [LocalRepository(n, str(tmp_path / n)) for n in ["z", "m", "a"]]
    mocker.patch("reposync.core.repo_manager.list_local_repos", return_value=local_repos)
    manager = make_manager(tmp_path, [remote("team_q"), remote("team_b")], max_workers=1)

    report = manager.sync()

    assert [o.repo_name for o in report.bucket(OutcomeKind.UPDATED)] == ["z", "m", "a"]
    assert [o.repo_name for o in report.bucket(OutcomeKind.CLONED)] == ["team_q", "team_b"]


def test_empty_root_and_empty_team(tmp_path: Path) -> None:
    """Verifies that nothing to do still yields a complete, empty report."""
    manager = make_manager(tmp_path, [])

    report = manager.sync()

    assert report.total == 0
    assert set(report.buckets) == set(OutcomeKind)


def test_plan_does_not_run_git(mocker: MagicMock, tmp_path: Path) -> None:
    """Verifies that planning only reconciles."""
    mock_pull = mocker.patch("reposync.operations.pull.pull_repo")
    mock_clone = mocker.patch("reposync.operations.clone.clone_repo")
    manager = make_manager(tmp_path, [remote("team_alpha")], local_names=["beta"])

    plan = manager.plan()

    assert [r.name for r in plan.new_repos] == ["team_alpha"]
    assert [r.name for r in plan.existing_repos] == ["beta"]
    mock_pull.assert_not_called()
    mock_clone.assert_not_called()


def test_pool_size_follows_task_count(tmp_path: Path) -> None:
    manager = make_manager(tmp_path, [])
    capped = make_manager(tmp_path, [], max_workers=2)

    assert manager._pool_size(0) == 1
    assert manager._pool_size(40) == 40
    assert capped._pool_size(40) == 2


def test_clone_operation_strips_prefix(tmp_path: Path) -> None:
    """Scenario: team_alpha is cloned into <root>/alpha."""
    operation = CloneOperation(str(tmp_path), team_prefix=PREFIX)

    assert operation.dir_name(remote("team_alpha")) == "alpha"
