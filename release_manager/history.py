"""
Release history persistence.

The history file is a JSON array of release records:

    [
      {
        "tag_name": "release-20240101-1200",
        "created_at": "2024-01-01T12:00:00Z",
        "release_id": 123456
      }
    ]

A missing file is an empty history. An unreadable or malformed file is also
treated as empty unless the store is strict, in which case HistoryError is
raised. Treating a corrupt file as empty means the next save overwrites it
with only the new release, so the warning logged for that case matters.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Iterable

from loguru import logger

from release_manager.exceptions import HistoryError
from release_manager.retention.records import ReleaseRecord


class HistoryStore:
    """Loads and saves release records as a JSON file."""

    def __init__(self, path: Path | str, strict: bool = False):
        """
        Initialize the store.

        Args:
            path: Path to the history JSON file
            strict: Raise HistoryError on a corrupt file instead of
                returning an empty history
        """
        self.path = Path(path)
        self.strict = strict

    def load(self) -> list[ReleaseRecord]:
        """
        Load release records.

        Returns:
            Records in file order (empty if the file does not exist)

        Raises:
            HistoryError: If strict and the file cannot be parsed
        """
        if not self.path.exists():
            logger.info(f"No history file at {self.path}, starting empty")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            records = self._parse(data)
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            if self.strict:
                raise HistoryError(f"Could not read history {self.path}: {e}") from e
            logger.warning(
                f"Could not read history {self.path} ({e}); treating as empty. "
                f"The next save will overwrite it."
            )
            return []

        logger.debug(f"Loaded {len(records)} records from {self.path}")
        return records

    @staticmethod
    def _parse(data: object) -> list[ReleaseRecord]:
        if not isinstance(data, list):
            raise ValueError(f"History must be a JSON array, got {type(data).__name__}")
        return [ReleaseRecord.from_dict(item) for item in data]

    def save(self, records: Iterable[ReleaseRecord]) -> None:
        """
        Write release records, replacing the file atomically.

        Args:
            records: Records to persist, written in the given order

        Raises:
            HistoryError: If the file cannot be written
        """
        payload = [r.to_dict() for r in records]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                    f.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise HistoryError(f"Could not write history {self.path}: {e}") from e

        logger.info(f"Saved {len(payload)} records to {self.path}")
