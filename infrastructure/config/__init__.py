"""
Configuration management: models, loading, and validation.

Handles:
- SiteConfig: Main site configuration
- Stats source configs: HTTP API, local snapshot
- Taxonomy, legacy redirect and override loading from YAML
- Environment variable overrides

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import (
    load_category_overrides,
    load_legacy_redirects,
    load_site,
    load_site_config,
    load_taxonomy_config,
)
from infrastructure.config.models import (
    HttpSourceConfig,
    # Main config
    SiteConfig,
    SnapshotSourceConfig,
    # Enums
    StatsSourceKind,
)

__all__ = [
    # Main config (most commonly used)
    "SiteConfig",
    "load_site_config",
    "load_site",
    # Enums
    "StatsSourceKind",
    # Source configs
    "HttpSourceConfig",
    "SnapshotSourceConfig",
    # Loaders
    "load_taxonomy_config",
    "load_legacy_redirects",
    "load_category_overrides",
]
