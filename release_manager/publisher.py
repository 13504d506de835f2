"""
Publish a release and prune old ones.

Runs the full sequence: load history, create the new release, apply the
retention policy, delete pruned releases from the host and save the kept
history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, Sequence

from loguru import logger

from release_manager.exceptions import ReleaseHostError
from release_manager.history import HistoryStore
from release_manager.retention.policy import DEFAULT_POLICY, RetentionEngine, RetentionPolicy
from release_manager.retention.records import ReleaseRecord, make_tag, to_utc, utc_now
from release_manager.utils.timing import timed_section


class ReleaseHost(Protocol):
    """Remote operations needed to publish and prune releases."""

    def create(self, tag_name: str, asset_path: Path | str) -> int: ...

    def delete(self, release_id: int, tag_name: str) -> None: ...


@dataclass
class PublishResult:
    """
    Result of a publish run.

    Attributes:
        record: The newly created release
        kept: Releases kept after retention, ascending
        deleted: Releases selected for deletion
        failed_deletions: Deleted releases whose remote removal failed
        errors: Error messages for failed deletions
        dry_run: Whether remote and disk writes were skipped
        upload_seconds: Time spent creating the release and uploading
    """

    record: ReleaseRecord
    kept: list[ReleaseRecord]
    deleted: list[ReleaseRecord]
    failed_deletions: list[ReleaseRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    dry_run: bool = False
    upload_seconds: float = 0.0

    @property
    def success(self) -> bool:
        """True if every selected release was deleted."""
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "record": self.record.to_dict(),
            "kept": [r.to_dict() for r in self.kept],
            "deleted": [r.to_dict() for r in self.deleted],
            "failed_deletions": [r.tag_name for r in self.failed_deletions],
            "errors": self.errors,
            "dry_run": self.dry_run,
            "upload_seconds": round(self.upload_seconds, 2),
        }


def _delete_releases(
    host: ReleaseHost, releases: Sequence[ReleaseRecord]
) -> tuple[list[ReleaseRecord], list[str]]:
    """Delete releases one by one; failures are collected, not raised."""
    failed: list[ReleaseRecord] = []
    errors: list[str] = []

    for release in releases:
        logger.info(f"Deleting old release: {release.tag_name}")
        try:
            host.delete(release.release_id, release.tag_name)
        except ReleaseHostError as e:
            logger.error(f"Failed to delete release {release.tag_name}: {e}")
            failed.append(release)
            errors.append(str(e))

    return failed, errors


def publish_release(
    asset_path: Path | str,
    host: ReleaseHost | None,
    store: HistoryStore,
    now: datetime | None = None,
    policy: RetentionPolicy = DEFAULT_POLICY,
    dry_run: bool = False,
) -> PublishResult:
    """
    Publish an asset as a new release and prune old releases.

    Args:
        asset_path: Build artifact to upload
        host: Release host; may be None in dry-run mode
        store: History store for kept releases
        now: Creation time of the new release (defaults to current UTC time)
        policy: Retention limits
        dry_run: Compute the retention result without remote calls or saving

    Returns:
        PublishResult describing kept and deleted releases

    Raises:
        ReleaseHostError: If the release could not be created or uploaded
        HistoryError: If the kept history could not be saved (or, for a
            strict store, loaded)
    """
    if host is None and not dry_run:
        raise ValueError("A release host is required unless dry_run is set")

    history = store.load()
    logger.info(f"Loaded {len(history)} historical releases")

    now = to_utc(now) if now is not None else utc_now()
    tag_name = make_tag(now)
    logger.info(f"Preparing release: {tag_name}")

    with timed_section("create_release") as metrics:
        if dry_run:
            logger.info(f"Dry run: not creating {tag_name}")
            release_id = 0
        else:
            release_id = host.create(tag_name, asset_path)
            metrics.size_bytes = Path(asset_path).stat().st_size
    metrics.log()

    record = ReleaseRecord(tag_name=tag_name, created_at=now, release_id=release_id)

    engine = RetentionEngine(history, policy)
    to_delete = engine.push(record)
    kept = engine.get_current()

    result = PublishResult(
        record=record,
        kept=kept,
        deleted=to_delete,
        dry_run=dry_run,
        upload_seconds=metrics.elapsed_seconds,
    )

    if dry_run:
        logger.info(f"Dry run: would delete {len(to_delete)} releases, history not saved")
        return result

    result.failed_deletions, result.errors = _delete_releases(host, to_delete)

    store.save(kept)

    return result
