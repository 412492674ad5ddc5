"""The immutable bundle page builders receive: taxonomy lookups, redirects and overrides."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from domain.taxonomy.models import Taxonomy
from domain.taxonomy.redirects import RedirectDecider
from domain.taxonomy.resolver import TaxonomyResolver

DEFAULT_SITE_NAME = "Cyberstats"


@dataclass(frozen=True)
class Site:
    """
    Everything loaded once at start-up and shared by all requests.

    Built by ``infrastructure.config.load_site``; tests build it directly from
    fixture taxonomies.
    """

    resolver: TaxonomyResolver
    redirects: RedirectDecider
    site_url: str = "https://cyberstats.io"
    site_name: str = DEFAULT_SITE_NAME
    category_overrides: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        resolver: TaxonomyResolver,
        legacy_redirects: Mapping[str, str] | None = None,
        *,
        site_url: str = "https://cyberstats.io",
        site_name: str = DEFAULT_SITE_NAME,
        category_overrides: Mapping[str, str] | None = None,
    ) -> "Site":
        """Wire resolver and redirect decider, rejecting redirect chains."""
        decider = RedirectDecider(resolver, legacy_redirects).validated()
        return cls(
            resolver=resolver,
            redirects=decider,
            site_url=site_url.rstrip("/"),
            site_name=site_name,
            category_overrides=MappingProxyType(dict(category_overrides or {})),
        )

    @property
    def taxonomy(self) -> Taxonomy:
        return self.resolver.taxonomy
