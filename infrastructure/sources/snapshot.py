"""Local snapshot source: filters applied in-process over a pandas-read file."""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from domain.catalog import item_matches
from domain.schemas import TaggedItem
from domain.taxonomy.slugs import normalize
from infrastructure.config.models import SiteConfig, StatsSourceKind
from infrastructure.io import read_table
from infrastructure.sources.base import StatsSource, StatsSourceError
from infrastructure.sources.registry import register_source

logger = logging.getLogger(__name__)


class SnapshotStatsSource(StatsSource):
    """
    Stats read from a local snapshot (JSON, CSV or Excel) via pandas.

    - Filters (limit, tag, days) are applied locally with the same semantics as the API
    - In CSV/Excel snapshots ``tags`` is a single column joined by ``snapshot.tag_separator``
    - The file is read once, on first use
    """

    kind = StatsSourceKind.SNAPSHOT

    def __init__(self, *, cfg: SiteConfig, path: Path) -> None:
        super().__init__(cfg=cfg)
        self.path = path
        self._items: list[TaggedItem] | None = None

    @classmethod
    def from_cfg(cls, cfg: SiteConfig) -> "SnapshotStatsSource":
        if cfg.snapshot.path is None:
            raise ValueError("snapshot.path is required for the snapshot source")
        return cls(cfg=cfg, path=cfg.snapshot.path)

    def _load(self) -> list[TaggedItem]:
        if self._items is not None:
            return self._items

        try:
            df = read_table(self.path)
        except (FileNotFoundError, ValueError) as e:
            raise StatsSourceError(f"Cannot read snapshot {self.path}: {e}") from e

        sep = self.cfg.snapshot.tag_separator
        if "tags" in df.columns:
            df["tags"] = df["tags"].apply(
                lambda v: [t.strip() for t in v.split(sep) if t.strip()] if isinstance(v, str) else v
            )

        # Round-trip through JSON: numpy scalars -> Python, NaN -> null, timestamps -> ISO
        records = json.loads(df.to_json(orient="records", date_format="iso"))
        self._items = self._parse_records(records)
        logger.info("Loaded %d items from snapshot %s", len(self._items), self.path)
        return self._items

    def fetch_items(
        self,
        *,
        limit: int,
        tag: str | None = None,
        days: int | None = None,
    ) -> list[TaggedItem]:
        items = self._load()

        if days is not None:
            cutoff = datetime.now(timezone.utc) - timedelta(days=int(days))
            items = [it for it in items if it.created_at is not None and it.created_at >= cutoff]

        if tag:
            wanted = {normalize(tag)}
            items = [it for it in items if item_matches(it, wanted)]

        return list(items[: int(limit)])


register_source(StatsSourceKind.SNAPSHOT, SnapshotStatsSource)
