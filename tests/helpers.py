"""Test helpers for building release records."""

from datetime import datetime, timedelta, timezone

from release_manager.retention.records import ReleaseRecord

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_release(days_ago: float, release_id: int, now: datetime = NOW) -> ReleaseRecord:
    """Build a release created ``days_ago`` days before ``now``."""
    return ReleaseRecord(
        tag_name=f"release-{release_id}",
        created_at=now - timedelta(days=days_ago),
        release_id=release_id,
    )
