"""Main entry point for reposync CLI."""

from dotenv import load_dotenv
load_dotenv()

import sys
import argparse
from typing import List, Optional

from . import __version__
from .config import Config
from .core.logger import setup_logging
from .core.github_client import GitHubClient, PAGINATION_POLICIES, PAGINATION_RAW
from .core.repo_manager import RepoManager
from .utils.report import print_summary, render_plan


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='reposync',
        description='Tool to keep team repos up to date.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clone new team repos and pull every local repo
  reposync -u https://api.github.com/organizations/1/team/2/repos -d ~/work -p team_

  # Show what would be cloned and pulled
  reposync --dry-run

  # Clone over SSH, at most 8 git processes at a time
  reposync --ssh --workers 8
        """
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    config_group = parser.add_argument_group('configuration')
    config_group.add_argument(
        '-u', '--github_team_repo_url',
        help='Points to github repo list, e.g. '
             'https://api.github.com/organizations/[organization_id]/team/[team_id]/repos '
             '(overrides GITHUB_TEAM_REPO_URL)'
    )
    config_group.add_argument(
        '-d', '--repo_root_dir',
        help='Directory with all repos (overrides REPO_ROOT_DIR)'
    )
    config_group.add_argument(
        '-t', '--github_token',
        help='Github token with permissions to list all team repos (overrides GITHUB_TOKEN)'
    )
    config_group.add_argument(
        '-p', '--github_team_prefix',
        help='e.g. team_. Removed from the directory name when cloning; '
             'set it to empty if your team does not use one (overrides GITHUB_TEAM_PREFIX)'
    )

    exec_group = parser.add_argument_group('execution control')
    exec_group.add_argument(
        '--workers',
        type=int,
        metavar='N',
        help='Maximum parallel git processes (default: one per repository)'
    )
    exec_group.add_argument(
        '--ssh',
        action='store_true',
        help='Clone with SSH URLs instead of HTTPS'
    )
    exec_group.add_argument(
        '--pagination',
        choices=PAGINATION_POLICIES,
        default=PAGINATION_RAW,
        help="'raw' stops at GitHub's first empty page, 'filtered' stops at the first "
             "page without active team repos (default: raw)"
    )
    exec_group.add_argument(
        '--git-timeout',
        type=float,
        metavar='SECONDS',
        help='Timeout for each git process (default: none)'
    )
    exec_group.add_argument(
        '--dry-run',
        action='store_true',
        help='Preview clones and pulls without executing'
    )

    output_group = parser.add_argument_group('output')
    output_group.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show progress messages on stderr'
    )
    output_group.add_argument(
        '--log-dir',
        help='Directory for log files (default: ./logs)'
    )
    output_group.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored report'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(log_dir=args.log_dir, verbose=args.verbose)

    try:
        config = Config.from_env_and_args(
            github_team_repo_url=args.github_team_repo_url,
            repo_root_dir=args.repo_root_dir,
            github_token=args.github_token,
            github_team_prefix=args.github_team_prefix,
            max_workers=args.workers,
            clone_protocol='ssh' if args.ssh else 'https',
            pagination=args.pagination,
            git_timeout=args.git_timeout,
            dry_run=args.dry_run
        )

        logger.info("Configuration loaded")
        logger.info(f"  Team repo URL: {config.github_team_repo_url}")
        logger.info(f"  Root directory: {config.repo_root_dir}")
        logger.info(f"  Team prefix: {config.github_team_prefix!r}")

        github_client = GitHubClient(
            team_repos_url=config.github_team_repo_url,
            token=config.github_token,
            team_prefix=config.github_team_prefix,
            clone_protocol=config.clone_protocol,
            pagination=config.pagination
        )
        repo_manager = RepoManager(
            github_client=github_client,
            repo_root_dir=config.repo_root_dir,
            team_prefix=config.github_team_prefix,
            max_workers=config.max_workers,
            git_timeout=config.git_timeout
        )

        if config.dry_run:
            print(render_plan(repo_manager.plan()))
            return 0

        report = repo_manager.sync()
        use_color = not args.no_color and sys.stdout.isatty()
        print_summary(report, use_color=use_color)

        return 1 if report.has_errors else 0

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
