"""
Timing utilities.

Measures how long release creation and asset upload take, and the upload
throughput when the asset size is known.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator

from loguru import logger

_MB = 1024 * 1024


@dataclass
class TimingMetrics:
    """
    Elapsed time of a timed section.

    Attributes:
        name: Section name used in log messages
        elapsed_seconds: Wall-clock duration, set when the section exits
        size_bytes: Bytes transferred in the section, if any
    """

    name: str
    elapsed_seconds: float = 0.0
    size_bytes: int | None = None

    @property
    def mb_per_second(self) -> float | None:
        """Transfer rate in MB/s, or None without a size or duration."""
        if not self.size_bytes or self.elapsed_seconds <= 0:
            return None
        return self.size_bytes / _MB / self.elapsed_seconds

    def log(self, level: str = "info") -> None:
        """Log the duration, and the transfer rate when known."""
        message = f"Timing [{self.name}]: {self.elapsed_seconds:.2f}s"
        rate = self.mb_per_second
        if rate is not None:
            message += f" ({self.size_bytes / _MB:.1f} MB at {rate:.1f} MB/s)"
        getattr(logger, level)(message)


@contextmanager
def timed_section(name: str) -> Generator[TimingMetrics, None, None]:
    """
    Context manager for timing code sections.

    Usage:
        with timed_section("create_release") as metrics:
            host.create(tag, asset)
            metrics.size_bytes = asset.stat().st_size

        metrics.log()

    The elapsed time is recorded even if the section raises.
    """
    metrics = TimingMetrics(name=name)
    start = time.perf_counter()
    try:
        yield metrics
    finally:
        metrics.elapsed_seconds = time.perf_counter() - start
