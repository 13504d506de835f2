"""
Release retention policy engine.

Decides which previously published releases to keep when a new release is
added. Two rules apply to the existing history:

- Spacing: walking oldest to newest, a release is kept only if it is at
  least ``min_interval`` after the most recent kept release (the anchor).
- Capacity: the oldest survivors are dropped until there is room for the
  new release within ``max_kept``.

The new release is always kept and is never checked against either rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable

from loguru import logger

from release_manager.retention.records import ReleaseRecord, sort_records

MIN_INTERVAL = timedelta(days=7)
MAX_KEPT = 7


@dataclass(frozen=True)
class RetentionPolicy:
    """
    Retention limits for published releases.

    Attributes:
        min_interval: Minimum time between two consecutive kept releases
        max_kept: Maximum number of releases kept, including the new one
    """

    min_interval: timedelta = MIN_INTERVAL
    max_kept: int = MAX_KEPT

    def __post_init__(self) -> None:
        """Validate policy limits."""
        if self.max_kept < 1:
            raise ValueError("max_kept must be at least 1")
        if self.min_interval < timedelta(0):
            raise ValueError("min_interval must not be negative")


DEFAULT_POLICY = RetentionPolicy()


@dataclass(frozen=True)
class RetentionResult:
    """
    Outcome of applying the retention policy.

    Attributes:
        kept: Releases to keep, ascending by creation time
        deleted: Releases to remove from the host; spacing removals first,
            then capacity removals
    """

    kept: tuple[ReleaseRecord, ...]
    deleted: tuple[ReleaseRecord, ...]


def apply_retention(
    existing: Iterable[ReleaseRecord],
    new_record: ReleaseRecord,
    policy: RetentionPolicy = DEFAULT_POLICY,
) -> RetentionResult:
    """
    Partition existing releases plus a new one into kept and deleted.

    Args:
        existing: Previously kept releases, in any order
        new_record: Release that was just created
        policy: Retention limits

    Returns:
        RetentionResult where kept always contains new_record
    """
    survivors: list[ReleaseRecord] = []
    deleted: list[ReleaseRecord] = []

    for candidate in sort_records(existing):
        if not survivors:
            survivors.append(candidate)
            continue

        anchor = survivors[-1]
        if candidate.created_at - anchor.created_at < policy.min_interval:
            logger.debug(
                f"{candidate.tag_name} is within {policy.min_interval} of {anchor.tag_name}"
            )
            deleted.append(candidate)
        else:
            survivors.append(candidate)

    # Leave room for the new release
    while len(survivors) >= policy.max_kept:
        oldest = survivors.pop(0)
        logger.debug(f"{oldest.tag_name} exceeds capacity of {policy.max_kept}")
        deleted.append(oldest)

    survivors.append(new_record)

    return RetentionResult(kept=tuple(sort_records(survivors)), deleted=tuple(deleted))


class RetentionEngine:
    """
    Holds the kept release history for a single run.

    Constructed from the loaded history, updated once with push(), then read
    with get_current(). Not safe for concurrent use.
    """

    def __init__(
        self,
        releases: Iterable[ReleaseRecord],
        policy: RetentionPolicy = DEFAULT_POLICY,
    ):
        """
        Initialize the engine.

        Args:
            releases: Existing releases in any order; duplicates are kept
            policy: Retention limits (defaults to DEFAULT_POLICY)
        """
        self._releases = sort_records(releases)
        self._policy = policy

    @property
    def policy(self) -> RetentionPolicy:
        return self._policy

    def get_current(self) -> list[ReleaseRecord]:
        """Snapshot of the kept releases, ascending by creation time."""
        return list(self._releases)

    def push(self, new_record: ReleaseRecord) -> list[ReleaseRecord]:
        """
        Add a new release and apply the retention policy.

        Args:
            new_record: Release that was just created

        Returns:
            Releases that must now be deleted from the host
        """
        result = apply_retention(self._releases, new_record, self._policy)
        self._releases = list(result.kept)

        logger.info(
            f"Retention applied: keeping {len(result.kept)}, deleting {len(result.deleted)}"
        )
        return list(result.deleted)
