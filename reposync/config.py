"""Configuration management for reposync."""

import os
from typing import Optional
from dataclasses import dataclass

from .core.github_client import CLONE_PROTOCOLS, PAGINATION_POLICIES, PAGINATION_RAW


@dataclass
class Config:
    """Configuration for reposync.

    Merges environment variables with CLI arguments.
    CLI arguments take precedence over environment variables.
    """

    github_team_repo_url: str
    repo_root_dir: str
    github_token: str
    github_team_prefix: str = ""
    max_workers: Optional[int] = None
    clone_protocol: str = "https"
    pagination: str = PAGINATION_RAW
    git_timeout: Optional[float] = None
    dry_run: bool = False

    @classmethod
    def from_env_and_args(
        cls,
        github_team_repo_url: Optional[str] = None,
        repo_root_dir: Optional[str] = None,
        github_token: Optional[str] = None,
        github_team_prefix: Optional[str] = None,
        max_workers: Optional[int] = None,
        clone_protocol: str = "https",
        pagination: str = PAGINATION_RAW,
        git_timeout: Optional[float] = None,
        dry_run: bool = False
    ) -> 'Config':
        """Create config from environment variables and CLI arguments.

        CLI arguments override environment variables.

        Args:
            github_team_repo_url: Team repository list URL (overrides GITHUB_TEAM_REPO_URL)
            repo_root_dir: Directory with all repos (overrides REPO_ROOT_DIR)
            github_token: GitHub token (overrides GITHUB_TOKEN)
            github_team_prefix: Team name prefix (overrides GITHUB_TEAM_PREFIX)
            max_workers: Cap on parallel git processes
            clone_protocol: 'https' or 'ssh'
            pagination: 'raw' or 'filtered'
            git_timeout: Timeout for each git invocation, in seconds
            dry_run: Only report what would be done

        Returns:
            Config instance

        Raises:
            ValueError: If required config is missing or invalid
        """
        # Merge with environment variables (CLI args take precedence)
        final_url = github_team_repo_url or os.getenv('GITHUB_TEAM_REPO_URL')
        final_root = repo_root_dir or os.getenv('REPO_ROOT_DIR')
        final_token = github_token or os.getenv('GITHUB_TOKEN')
        # An empty prefix is valid: the team doesn't use one
        if github_team_prefix is not None:
            final_prefix = github_team_prefix
        else:
            final_prefix = os.getenv('GITHUB_TEAM_PREFIX', '')

        # Validate required fields
        if not final_url:
            raise ValueError(
                "GitHub team repository URL is required. "
                "Set GITHUB_TEAM_REPO_URL in .env or use --github_team_repo_url"
            )
        if not final_root:
            raise ValueError(
                "Repository root directory is required. "
                "Set REPO_ROOT_DIR in .env or use --repo_root_dir"
            )
        if not final_token:
            raise ValueError(
                "GitHub token is required. "
                "Set GITHUB_TOKEN in .env or use --github_token"
            )

        final_root = os.path.abspath(os.path.expanduser(final_root))
        if not os.path.isdir(final_root):
            raise ValueError(f"Repository root directory does not exist: {final_root}")

        if max_workers is not None and max_workers < 1:
            raise ValueError("Number of workers must be at least 1")
        if clone_protocol not in CLONE_PROTOCOLS:
            raise ValueError(f"Unknown clone protocol: {clone_protocol}")
        if pagination not in PAGINATION_POLICIES:
            raise ValueError(f"Unknown pagination policy: {pagination}")

        return cls(
            github_team_repo_url=final_url,
            repo_root_dir=final_root,
            github_token=final_token,
            github_team_prefix=final_prefix,
            max_workers=max_workers,
            clone_protocol=clone_protocol,
            pagination=pagination,
            git_timeout=git_timeout,
            dry_run=dry_run
        )
