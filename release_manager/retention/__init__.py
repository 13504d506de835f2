"""
Release retention for release_manager.

Usage:
    from release_manager.retention import ReleaseRecord, RetentionEngine

    engine = RetentionEngine(history)
    to_delete = engine.push(new_record)
    kept = engine.get_current()
"""

from release_manager.retention.policy import (
    DEFAULT_POLICY,
    MAX_KEPT,
    MIN_INTERVAL,
    RetentionEngine,
    RetentionPolicy,
    RetentionResult,
    apply_retention,
)
from release_manager.retention.records import ReleaseRecord, make_tag, sort_records

__all__ = [
    "DEFAULT_POLICY",
    "MAX_KEPT",
    "MIN_INTERVAL",
    "ReleaseRecord",
    "RetentionEngine",
    "RetentionPolicy",
    "RetentionResult",
    "apply_retention",
    "make_tag",
    "sort_records",
]
