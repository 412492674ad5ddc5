"""
Stats sources.

Implements the adapter pattern for where tagged statistics come from:
- HTTP (the remote stats API, via httpx)
- Snapshot (local JSON/CSV/Excel files, via pandas)

All sources implement the StatsSource interface.
"""

from infrastructure.sources.base import StatsSource, StatsSourceError
from infrastructure.sources.factory import make_source
from infrastructure.sources.http import HttpStatsSource
from infrastructure.sources.snapshot import SnapshotStatsSource

__all__ = [
    # Abstract base
    "StatsSource",
    "StatsSourceError",
    # Concrete implementations
    "HttpStatsSource",
    "SnapshotStatsSource",
    # Factory (most commonly used)
    "make_source",
]
