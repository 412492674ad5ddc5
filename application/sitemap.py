"""Sitemap entries for static pages, vendors, categories and individual stats."""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel

from application.constants import (
    CATEGORY_SITEMAP_PRIORITY,
    STAT_SITEMAP_PRIORITY,
    STATIC_SITEMAP_PAGES,
    VENDOR_SITEMAP_PRIORITY,
)
from application.vendors import VENDORS_ROOT
from domain.schemas import TaggedItem
from domain.site import Site
from domain.taxonomy import normalize, title_slug

ChangeFrequency = Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class SitemapEntry(BaseModel):
    url: str
    last_modified: datetime
    change_frequency: ChangeFrequency
    priority: float


def _track_latest(latest: dict[str, datetime | None], key: str, when: datetime | None) -> None:
    current = latest.get(key)
    if key not in latest or (when is not None and (current is None or when > current)):
        latest[key] = when if when is not None else current


def build_sitemap(
    site: Site,
    items: Sequence[TaggedItem],
    now: datetime | None = None,
) -> list[SitemapEntry]:
    """
    Build every sitemap entry: static pages, vendors, categories, then stats (newest first).

    Category URLs are canonical: synonym tags collapse onto their subcategory's
    two-segment path, so the sitemap never lists a URL that redirects.
    Items without a date still contribute their URLs; ``now`` stands in for
    the missing date.
    """
    now = now or datetime.now(timezone.utc)
    base = site.site_url

    entries = [
        SitemapEntry(url=f"{base}{path}", last_modified=now, change_frequency=freq, priority=priority)
        for path, freq, priority in STATIC_SITEMAP_PAGES
    ]

    vendors: dict[str, datetime | None] = {}
    categories: dict[str, datetime | None] = {}
    for item in items:
        if item.publisher:
            slug = normalize(item.publisher)
            if slug:
                _track_latest(vendors, f"{VENDORS_ROOT}/{slug}", item.created_at)
        for tag in item.tags:
            slug = normalize(tag)
            if slug:
                _track_latest(categories, site.resolver.canonical_path_for_slug(slug), item.created_at)

    entries.extend(
        SitemapEntry(
            url=f"{base}{path}",
            last_modified=when or now,
            change_frequency="daily",
            priority=VENDOR_SITEMAP_PRIORITY,
        )
        for path, when in vendors.items()
    )
    entries.extend(
        SitemapEntry(
            url=f"{base}{path}",
            last_modified=when or now,
            change_frequency="daily",
            priority=CATEGORY_SITEMAP_PRIORITY,
        )
        for path, when in categories.items()
    )

    for item in sorted(items, key=lambda it: it.created_at or _EPOCH, reverse=True):
        slug = title_slug(item.title)
        if not slug:
            continue
        entries.append(
            SitemapEntry(
                url=f"{base}/stats/{slug}",
                last_modified=item.created_at or now,
                change_frequency="monthly",
                priority=STAT_SITEMAP_PRIORITY,
            )
        )

    return entries
