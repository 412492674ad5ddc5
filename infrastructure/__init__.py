"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Stats sources (remote API, local snapshot)
- Configuration loading (YAML, environment)
- Observability (logging)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    SiteConfig,
    StatsSourceKind,
    load_site,
    load_site_config,
)
from infrastructure.sources import StatsSource, StatsSourceError, make_source

__all__ = [
    # Stats sources (most commonly used)
    "make_source",
    "StatsSource",
    "StatsSourceError",
    # Configuration (most commonly used)
    "load_site_config",
    "load_site",
    "SiteConfig",
    "StatsSourceKind",
]
