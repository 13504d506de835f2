"""
Command line interface for release_manager.

Usage:
    release-manager --asset result/iso/nixos.iso --repo owner/repo
    release-manager --asset nixos.iso --repo owner/repo --history releases.json
    release-manager --asset nixos.iso --repo owner/repo --dry-run
    release-manager --asset nixos.iso --repo owner/repo --dry-run --json

Requires GITHUB_TOKEN unless --dry-run is given.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from release_manager.exceptions import ReleaseManagerError
from release_manager.github import GitHubReleaseHost
from release_manager.history import HistoryStore
from release_manager.publisher import PublishResult, publish_release
from release_manager.utils.config import get_config
from release_manager.utils.startup import fail_fast_startup


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="release-manager",
        description="Publish a build artifact as a GitHub release and prune old releases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Retention: releases closer than 7 days to the previous kept release are
deleted, and at most 7 releases (including the new one) are kept.
""",
    )

    parser.add_argument(
        "--asset",
        "--iso",
        dest="asset",
        type=Path,
        required=True,
        metavar="PATH",
        help="Artifact file to upload",
    )
    parser.add_argument(
        "--repo",
        required=True,
        metavar="OWNER/REPO",
        help="GitHub repository",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=None,
        metavar="PATH",
        help="Release history JSON file (default: releases.json)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the retention result without creating, deleting or saving",
    )
    parser.add_argument(
        "--strict-history",
        action="store_true",
        help="Fail instead of starting empty when the history file is corrupt",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of the text summary",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output except errors",
    )

    return parser


def print_result(result: PublishResult) -> None:
    """Print the retention outcome."""
    print("Retention Policy Result:")
    print(f"  Keeping: {len(result.kept)} releases")
    for r in result.kept:
        print(f"    - {r.tag_name} ({r.created_at.isoformat()})")
    print(f"  Deleting: {len(result.deleted)} releases")
    for r in result.deleted:
        print(f"    - {r.tag_name} ({r.created_at.isoformat()})")
    if result.failed_deletions:
        print(f"  Failed deletions: {len(result.failed_deletions)}")
        for r in result.failed_deletions:
            print(f"    - {r.tag_name}")


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Returns:
        Exit code (0 for success, 1 for a fatal error)
    """
    args = build_parser().parse_args(argv)
    config = get_config()

    logger.remove()
    logger.add(sys.stderr, level="ERROR" if args.quiet else config.log_level)

    history_path = args.history or config.history_path
    store = HistoryStore(history_path, strict=args.strict_history)

    try:
        fail_fast_startup(dry_run=args.dry_run)

        host = None
        if not args.dry_run:
            host = GitHubReleaseHost(
                repo=args.repo,
                token=config.github_token,
                api_url=config.api_url,
                timeout=config.timeout,
            )

        result = publish_release(
            asset_path=args.asset,
            host=host,
            store=store,
            dry_run=args.dry_run,
        )
    except (ReleaseManagerError, ValueError) as e:
        logger.error(f"Release failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif not args.quiet:
        print_result(result)
        if not result.dry_run:
            print(f"Updated {history_path} successfully.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
