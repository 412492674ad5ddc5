"""Base interface for stats data sources."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from domain.schemas import TaggedItem
from infrastructure.config.models import SiteConfig, StatsSourceKind

logger = logging.getLogger(__name__)


class StatsSourceError(RuntimeError):
    """The stats source could not deliver a usable list of items."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StatsSource(ABC):
    """
    Abstract base class for stats sources.
    Common interface for the remote stats API and local snapshots.

    All concrete sources must implement:
    - fetch_items(): return tagged items, newest data as provided by the backend
    """

    kind: StatsSourceKind
    cfg: SiteConfig

    def __init__(self, *, cfg: SiteConfig) -> None:
        self.cfg = cfg

    @abstractmethod
    def fetch_items(
        self,
        *,
        limit: int,
        tag: str | None = None,
        days: int | None = None,
    ) -> list[TaggedItem]:
        """
        Fetch up to ``limit`` items, optionally only those carrying ``tag``
        and/or created within the last ``days`` days.

        Raises:
            StatsSourceError: If the backend fails or returns a malformed payload
        """

    def close(self) -> None:
        """Release underlying resources (HTTP connections, etc.)."""

    def __enter__(self) -> "StatsSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def _parse_records(records: Iterable[Any]) -> list[TaggedItem]:
        """Validate raw records; malformed ones are skipped with a warning."""
        items: list[TaggedItem] = []
        skipped = 0
        for idx, record in enumerate(records):
            if not isinstance(record, dict):
                skipped += 1
                logger.warning("Skipping record %d: expected an object, got %s", idx, type(record).__name__)
                continue
            try:
                items.append(TaggedItem.model_validate(record))
            except ValidationError as e:
                skipped += 1
                logger.warning("Skipping record %d (id=%s): %s", idx, record.get("id"), e.errors()[0].get("msg"))
        if skipped:
            logger.info("Parsed %d items (%d malformed records skipped)", len(items), skipped)
        return items
