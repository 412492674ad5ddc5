"""Permanent-redirect decisions for category URLs."""

import logging
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from domain.errors import RedirectConfigError
from domain.taxonomy.resolver import CATEGORIES_ROOT, ResolutionKind, TaxonomyResolver

logger = logging.getLogger(__name__)

PERMANENT_REDIRECT = 301


class RedirectSource(str, Enum):
    """Which mechanism produced a redirect."""

    LEGACY = "legacy"
    TAXONOMY = "taxonomy"


class RedirectTarget(BaseModel):
    """Where to send the client. Always permanent (301)."""

    model_config = ConfigDict(frozen=True)

    location: str
    source: RedirectSource
    status_code: int = PERMANENT_REDIRECT


def bare_path(request_path: str) -> str:
    """Request path without query string, fragment or a single trailing slash."""
    path = request_path.split("?", 1)[0].split("#", 1)[0]
    if path.endswith("/"):
        path = path[:-1]
    return path


def split_category_path(request_path: str) -> tuple[str, ...] | None:
    """
    Return the slug segments of a ``/categories/...`` path.

    None for paths outside ``/categories/`` and for the bare index. Query
    strings, fragments and a single trailing slash are ignored.
    """
    path = bare_path(request_path)
    prefix = CATEGORIES_ROOT + "/"
    if not path.startswith(prefix):
        return None
    rest = path[len(prefix) :]
    if not rest:
        return None
    return tuple(rest.split("/"))


class RedirectDecider:
    """
    Decide whether an incoming category path must be permanently redirected.

    Order:
      1. Legacy map (exact slug-path key). Always wins.
      2. A single segment that resolves to a subcategory (by slug or synonym)
         goes to its two-segment canonical path.
      3. Otherwise no redirect.

    Two-segment paths are only ever rewritten by the legacy map.
    """

    def __init__(self, resolver: TaxonomyResolver, legacy_redirects: Mapping[str, str] | None = None) -> None:
        self.resolver = resolver
        self.legacy_redirects: Mapping[str, str] = MappingProxyType(dict(legacy_redirects or {}))

    def decide_redirect(self, request_path: str) -> RedirectTarget | None:
        segments = split_category_path(request_path)
        if segments is None:
            return None

        slug_path = "/".join(segments)
        legacy_target = self.legacy_redirects.get(slug_path)
        if legacy_target is not None:
            location = f"{CATEGORIES_ROOT}/{legacy_target}"
            logger.debug("Legacy redirect: %s -> %s", request_path, location)
            return RedirectTarget(location=location, source=RedirectSource.LEGACY)

        if len(segments) == 1:
            resolved = self.resolver.resolve_by_slug_path(segments)
            if resolved is not None and resolved.kind is ResolutionKind.CHILD:
                logger.debug("Taxonomy redirect: %s -> %s", request_path, resolved.canonical_path)
                return RedirectTarget(location=resolved.canonical_path, source=RedirectSource.TAXONOMY)

        return None

    def find_chains(self) -> list[tuple[str, str, str]]:
        """Legacy entries whose target is itself redirected, as (from, to, next)."""
        chains: list[tuple[str, str, str]] = []
        for src, dst in self.legacy_redirects.items():
            nxt = self.decide_redirect(f"{CATEGORIES_ROOT}/{dst}")
            if nxt is not None:
                chains.append((src, dst, nxt.location))
        return chains

    def validated(self) -> "RedirectDecider":
        """Return self, or raise RedirectConfigError if any legacy target would redirect again."""
        chains = self.find_chains()
        if chains:
            raise RedirectConfigError(chains)
        return self
