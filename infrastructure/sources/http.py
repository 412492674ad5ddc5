"""Stats API client over httpx."""

import logging
from typing import Any

import httpx

from domain.schemas import TaggedItem
from infrastructure.config.models import SiteConfig, StatsSourceKind
from infrastructure.sources.base import StatsSource, StatsSourceError
from infrastructure.sources.registry import register_source

logger = logging.getLogger(__name__)


class HttpStatsSource(StatsSource):
    """
    Remote stats API: GET <api_url>?key=...&format=json&limit=...[&tag=...][&days=...]

    - Response body must be a JSON object with an ``items`` list
    - Non-2xx status, transport errors and malformed bodies raise StatsSourceError
    """

    kind = StatsSourceKind.HTTP

    def __init__(self, *, cfg: SiteConfig, client: httpx.Client) -> None:
        super().__init__(cfg=cfg)
        self.client = client

    @classmethod
    def from_cfg(cls, cfg: SiteConfig) -> "HttpStatsSource":
        client = httpx.Client(
            timeout=cfg.http.timeout_s,
            headers={"Accept": "application/json"},
        )
        return cls(cfg=cfg, client=client)

    def close(self) -> None:
        self.client.close()

    def fetch_items(
        self,
        *,
        limit: int,
        tag: str | None = None,
        days: int | None = None,
    ) -> list[TaggedItem]:
        params: dict[str, Any] = {"format": "json", "limit": int(limit)}
        if self.cfg.http.api_key:
            params["key"] = self.cfg.http.api_key
        if tag:
            params["tag"] = tag
        if days is not None:
            params["days"] = int(days)

        try:
            resp = self.client.get(self.cfg.http.api_url, params=params)
        except httpx.HTTPError as e:
            raise StatsSourceError(f"Stats API request failed: {e}") from e

        if resp.status_code >= 400:
            raise StatsSourceError(
                f"Stats API returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise StatsSourceError("Stats API returned a non-JSON body") from e

        raw_items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(raw_items, list):
            raise StatsSourceError("Invalid stats API response: missing 'items' list")

        items = self._parse_records(raw_items)
        logger.info("Fetched %d items (limit=%d, tag=%s, days=%s)", len(items), limit, tag, days)
        return items


register_source(StatsSourceKind.HTTP, HttpStatsSource)
