"""
Release record model.

A ReleaseRecord identifies one published artifact: its tag, its UTC creation
time and the numeric id the hosting platform assigned to it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

TAG_PREFIX = "release-"
TAG_TIME_FORMAT = "%Y%m%d-%H%M"

_MAX_RELEASE_ID = 2**64 - 1

_FRACTION_RE = re.compile(r"\.(\d+)")


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC. Naive values are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp as written to the history file.

    Accepts a trailing ``Z`` and any number of fractional-second digits
    (older histories carry nanoseconds). Fractions are cut to microseconds.

    Raises:
        ValueError: If the value is not an ISO 8601 timestamp
    """
    # Python 3.10 fromisoformat: no Z, and only 3 or 6 fraction digits
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    value = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    return datetime.fromisoformat(value)


def make_tag(now: datetime) -> str:
    """
    Build a release tag from a creation time.

    Args:
        now: Creation time (converted to UTC)

    Returns:
        Tag of the form ``release-YYYYMMDD-HHMM``
    """
    return f"{TAG_PREFIX}{to_utc(now).strftime(TAG_TIME_FORMAT)}"


@dataclass(frozen=True)
class ReleaseRecord:
    """
    One published release.

    Attributes:
        tag_name: Human-readable identifier, also the git tag
        created_at: UTC creation time, the only ordering key
        release_id: Opaque id assigned by the host, used only for deletion
    """

    tag_name: str
    created_at: datetime
    release_id: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", to_utc(self.created_at))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON shape."""
        return {
            "tag_name": self.tag_name,
            "created_at": self.created_at.isoformat().replace("+00:00", "Z"),
            "release_id": self.release_id,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ReleaseRecord":
        """
        Build a record from its persisted JSON shape.

        Args:
            data: Mapping with tag_name, created_at and release_id

        Returns:
            ReleaseRecord

        Raises:
            ValueError: If a field is missing or has the wrong type or range
        """
        if not isinstance(data, dict):
            raise ValueError(f"Release record must be an object, got {type(data).__name__}")

        missing = [k for k in ("tag_name", "created_at", "release_id") if k not in data]
        if missing:
            raise ValueError(f"Release record missing fields: {', '.join(missing)}")

        tag_name = data["tag_name"]
        if not isinstance(tag_name, str) or not tag_name:
            raise ValueError(f"Invalid tag_name: {tag_name!r}")

        raw_created = data["created_at"]
        if not isinstance(raw_created, str):
            raise ValueError(f"Invalid created_at: {raw_created!r}")
        created_at = parse_timestamp(raw_created)

        release_id = data["release_id"]
        if isinstance(release_id, bool) or not isinstance(release_id, int):
            raise ValueError(f"Invalid release_id: {release_id!r}")
        if not 0 <= release_id <= _MAX_RELEASE_ID:
            raise ValueError(f"release_id out of range: {release_id}")

        return cls(tag_name=tag_name, created_at=created_at, release_id=release_id)


def sort_records(records: Iterable[ReleaseRecord]) -> list[ReleaseRecord]:
    """Sort records ascending by creation time; ties keep input order."""
    return sorted(records, key=lambda r: r.created_at)
