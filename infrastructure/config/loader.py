"""Configuration loading from YAML files."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from domain.site import Site
from domain.taxonomy.loader import parse_category_overrides, parse_legacy_redirects, parse_taxonomy_config
from domain.taxonomy.models import Taxonomy
from domain.taxonomy.resolver import TaxonomyResolver
from infrastructure.config.models import SiteConfig, StatsSourceKind
from infrastructure.constants import ENV_API_KEY, ENV_API_URL, ENV_SITE_URL

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML (or JSON) file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_taxonomy_config(path: Path) -> Taxonomy:
    """
    Load taxonomy from YAML file.

    This function handles file I/O, then delegates parsing to domain layer.
    """
    data = _load_yaml(path)
    return parse_taxonomy_config(data)


def load_legacy_redirects(path: Path) -> dict[str, str]:
    """Load the legacy redirect table."""
    return parse_legacy_redirects(_load_yaml(path))


def load_category_overrides(path: Path | None) -> dict[str, str]:
    """Load editor descriptions; a missing file means no overrides."""
    if path is None or not path.exists():
        logger.debug("No category overrides file (%s); continuing without overrides.", path)
        return {}
    return parse_category_overrides(_load_yaml(path))


def load_site_config(path: Path) -> SiteConfig:
    """
    Load site.yaml and construct a fully-resolved SiteConfig.

    Environment variables win over the file:
      - CYBERSTATS_API_KEY: stats API key (never stored in YAML)
      - CYBERSTATS_API_URL: stats API endpoint
      - CYBERSTATS_SITE_URL: public base URL
    """
    raw = _load_yaml(path)
    defaults = SiteConfig()

    source = StatsSourceKind(str(raw.get("source", defaults.source.value)).strip().lower())

    http_raw = dict(raw.get("http") or {})
    if os.getenv(ENV_API_URL):
        http_raw["api_url"] = os.environ[ENV_API_URL]
    if os.getenv(ENV_API_KEY):
        http_raw["api_key"] = os.environ[ENV_API_KEY]

    snapshot_raw = dict(raw.get("snapshot") or {})

    site_url = os.getenv(ENV_SITE_URL) or raw.get("site_url") or defaults.site_url

    overrides_value = raw.get("overrides_file", defaults.overrides_file)

    cfg = SiteConfig(
        site_url=str(site_url),
        site_name=str(raw.get("site_name", defaults.site_name)),
        source=source,
        http=http_raw,
        snapshot=snapshot_raw,
        fetch_limit=int(raw.get("fetch_limit", defaults.fetch_limit)),
        category_fetch_limit=int(raw.get("category_fetch_limit", defaults.category_fetch_limit)),
        category_min_count=int(raw.get("category_min_count", defaults.category_min_count)),
        taxonomy_file=Path(raw.get("taxonomy_file") or defaults.taxonomy_file),
        redirects_file=Path(raw.get("redirects_file") or defaults.redirects_file),
        overrides_file=Path(overrides_value) if overrides_value else None,
    )

    if cfg.source is StatsSourceKind.HTTP and not cfg.http.api_key:
        logger.warning("No %s set; the stats API will likely reject requests.", ENV_API_KEY)

    return cfg


def load_site(cfg: SiteConfig) -> Site:
    """
    Build the immutable Site bundle once at start-up.

    Fails fast on an ambiguous taxonomy (TaxonomyValidationError) and on legacy
    redirects that would chain into another redirect (RedirectConfigError).
    """
    taxonomy = load_taxonomy_config(cfg.taxonomy_file)
    legacy = load_legacy_redirects(cfg.redirects_file)
    overrides = load_category_overrides(cfg.overrides_file)

    site = Site.build(
        TaxonomyResolver(taxonomy),
        legacy,
        site_url=cfg.site_url,
        site_name=cfg.site_name,
        category_overrides=overrides,
    )
    logger.info(
        "Site loaded: %d categories, %d subcategories, %d legacy redirects, %d overrides",
        len(taxonomy.categories),
        sum(len(c.subcategories) for c in taxonomy.categories),
        len(legacy),
        len(overrides),
    )
    return site
