"""Configuration models (Pydantic classes)."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from infrastructure.constants import (
    DEFAULT_API_URL,
    DEFAULT_SITE_URL,
    OVERRIDES_FILE,
    REDIRECTS_FILE,
    TAXONOMY_FILE,
)


class StatsSourceKind(str, Enum):
    """Where tagged statistics come from."""

    HTTP = "http"
    SNAPSHOT = "snapshot"


class HttpSourceConfig(BaseModel):
    """Remote stats API settings."""

    api_url: str = DEFAULT_API_URL
    api_key: str | None = Field(default=None, repr=False)
    timeout_s: float = 30.0


class SnapshotSourceConfig(BaseModel):
    """Local snapshot settings (JSON, CSV or Excel)."""

    path: Path | None = None
    tag_separator: str = "|"


class SiteConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from site.yaml (+ environment overrides)
    - Validated by the configuration loader
    - Consumed by load_site() and the stats source factory
    """

    site_url: str = Field(default=DEFAULT_SITE_URL, description="Public base URL used in sitemap entries.")
    site_name: str = "Cyberstats"

    source: StatsSourceKind = Field(default=StatsSourceKind.HTTP, description="Stats source backend to use.")
    http: HttpSourceConfig = Field(default_factory=HttpSourceConfig)
    snapshot: SnapshotSourceConfig = Field(default_factory=SnapshotSourceConfig)

    fetch_limit: int = Field(default=10_000, description="Max items fetched for index/sitemap pages.")
    category_fetch_limit: int = Field(default=1_000, description="Max items fetched for one category page.")
    category_min_count: int = Field(default=3, description="Tags with fewer items are hidden from the index.")

    taxonomy_file: Path = Field(default_factory=lambda: TAXONOMY_FILE)
    redirects_file: Path = Field(default_factory=lambda: REDIRECTS_FILE)
    overrides_file: Path | None = Field(default_factory=lambda: OVERRIDES_FILE)

    @model_validator(mode="after")
    def _validate(self) -> "SiteConfig":
        self.site_url = self.site_url.rstrip("/")

        if self.fetch_limit <= 0 or self.category_fetch_limit <= 0:
            raise ValueError("fetch_limit and category_fetch_limit must be positive")
        if self.category_min_count < 1:
            raise ValueError("category_min_count must be >= 1")

        if self.source is StatsSourceKind.SNAPSHOT and self.snapshot.path is None:
            raise ValueError("snapshot.path is required when source=snapshot")

        return self
