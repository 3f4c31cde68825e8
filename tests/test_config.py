from pathlib import Path
from unittest.mock import MagicMock

import pytest

from reposync.config import Config

URL = "https://api.github.com/organizations/1/team/2/repos"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GITHUB_TEAM_REPO_URL", "REPO_ROOT_DIR", "GITHUB_TOKEN", "GITHUB_TEAM_PREFIX"):
        monkeypatch.delenv(name, raising=False)


def test_config_from_env(monkeypatch: MagicMock, tmp_path: Path) -> None:
    """Verifies that all settings can come from the environment."""
    monkeypatch.setenv("GITHUB_TEAM_REPO_URL", URL)
    monkeypatch.setenv("REPO_ROOT_DIR", str(tmp_path))
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    monkeypatch.setenv("GITHUB_TEAM_PREFIX", "team_")

    config = Config.from_env_and_args()

    assert config.github_team_repo_url == URL
    assert config.repo_root_dir == str(tmp_path)
    assert config.github_token == "secret"
    assert config.github_team_prefix == "team_"
    assert config.pagination == "raw"


def test_args_override_env(monkeypatch: MagicMock, tmp_path: Path) -> None:
    """Verifies CLI precedence, including an explicitly empty prefix."""
    monkeypatch.setenv("GITHUB_TEAM_REPO_URL", "https://example.invalid")
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    monkeypatch.setenv("GITHUB_TEAM_PREFIX", "team_")

    config = Config.from_env_and_args(
        github_team_repo_url=URL,
        repo_root_dir=str(tmp_path),
        github_token="cli-token",
        github_team_prefix="",
    )

    assert config.github_team_repo_url == URL
    assert config.github_token == "cli-token"
    assert config.github_team_prefix == ""


def test_prefix_defaults_to_empty(tmp_path: Path) -> None:
    config = Config.from_env_and_args(URL, str(tmp_path), "secret")

    assert config.github_team_prefix == ""


@pytest.mark.parametrize("missing", ["github_team_repo_url", "repo_root_dir", "github_token"])
def test_missing_required_setting(tmp_path: Path, missing: str) -> None:
    kwargs = {"github_team_repo_url": URL, "repo_root_dir": str(tmp_path), "github_token": "secret"}
    kwargs[missing] = None

    with pytest.raises(ValueError, match="required"):
        Config.from_env_and_args(**kwargs)


def test_root_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        Config.from_env_and_args(URL, str(tmp_path / "missing"), "secret")


@pytest.mark.parametrize("kwargs", [
    {"max_workers": 0},
    {"clone_protocol": "ftp"},
    {"pagination": "sometimes"},
])
def test_invalid_options(tmp_path: Path, kwargs: dict) -> None:
    with pytest.raises(ValueError):
        Config.from_env_and_args(URL, str(tmp_path), "secret", **kwargs)
