"""Vendor (publisher) index and detail page models."""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

from application.constants import RELATED_VENDORS_LIMIT, VENDOR_REPORTS_LIMIT, VENDOR_TOP_CATEGORIES_LIMIT
from domain.catalog import count_tags
from domain.schemas import NamedCount, TaggedItem
from domain.taxonomy import normalize

VENDORS_ROOT = "/vendors"
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class VendorSummary(BaseModel):
    name: str
    slug: str
    full_path: str
    stats_count: int
    latest_activity: datetime | None = None


class RelatedVendor(BaseModel):
    name: str
    slug: str
    full_path: str
    stats_count: int
    overlap: int


class VendorReport(BaseModel):
    title: str
    link: str
    published_on: datetime | None = None
    stats_count: int


class VendorPage(BaseModel):
    name: str
    slug: str
    full_path: str
    total_count: int
    items: list[TaggedItem] = Field(default_factory=list)
    top_categories: list[NamedCount] = Field(default_factory=list)
    related_vendors: list[RelatedVendor] = Field(default_factory=list)
    reports: list[VendorReport] = Field(default_factory=list)


def _later(a: datetime | None, b: datetime | None) -> datetime | None:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def build_vendor_index(items: Sequence[TaggedItem]) -> list[VendorSummary]:
    """
    One entry per publisher, most prolific first.

    Publisher names that collapse to the same slug keep only the one with
    more items (first seen wins a tie).
    """
    counts: Counter = Counter()
    latest: dict[str, datetime | None] = {}
    for item in items:
        if not item.publisher:
            continue
        counts[item.publisher] += 1
        latest[item.publisher] = _later(latest.get(item.publisher), item.created_at)

    by_slug: dict[str, VendorSummary] = {}
    for name, count in counts.items():
        slug = normalize(name)
        if not slug:
            continue
        existing = by_slug.get(slug)
        if existing is None or count > existing.stats_count:
            by_slug[slug] = VendorSummary(
                name=name,
                slug=slug,
                full_path=f"{VENDORS_ROOT}/{slug}",
                stats_count=count,
                latest_activity=latest[name],
            )

    return sorted(by_slug.values(), key=lambda v: (-v.stats_count, v.name.casefold()))


def _related_vendors(
    slug: str,
    items: Sequence[TaggedItem],
    vendor_tags: set[str],
) -> list[RelatedVendor]:
    stats: Counter = Counter()
    tags: dict[str, set[str]] = {}
    for item in items:
        if not item.publisher or normalize(item.publisher) == slug:
            continue
        stats[item.publisher] += 1
        tags.setdefault(item.publisher, set()).update(item.tags)

    scored = [
        RelatedVendor(
            name=name,
            slug=normalize(name),
            full_path=f"{VENDORS_ROOT}/{normalize(name)}",
            stats_count=stats[name],
            overlap=len(tags[name] & vendor_tags),
        )
        for name in stats
    ]
    scored = [v for v in scored if v.overlap > 0]
    scored.sort(key=lambda v: -v.overlap)
    return scored[:RELATED_VENDORS_LIMIT]


def _reports(items: Sequence[TaggedItem]) -> list[VendorReport]:
    per_source = Counter(item.source_name for item in items if item.source_name)
    reports: dict[str, VendorReport] = {}
    for item in items:
        if not item.source_name or not item.link or item.source_name in reports:
            continue
        reports[item.source_name] = VendorReport(
            title=item.source_name.replace(".html", "", 1).replace("_", " "),
            link=item.link,
            published_on=item.published_on or item.created_at,
            stats_count=per_source[item.source_name],
        )
    ordered = sorted(reports.values(), key=lambda r: r.published_on or _EPOCH, reverse=True)
    return ordered[:VENDOR_REPORTS_LIMIT]


def build_vendor_page(
    slug: str,
    items: Sequence[TaggedItem],
    *,
    days: int | None = None,
    now: datetime | None = None,
) -> VendorPage | None:
    """
    Vendor detail page for a publisher slug, or None if no item has that publisher.

    Args:
        slug: Publisher slug from the URL
        items: All items in the current window
        days: Only show items created in the last N days (the vendor still
            exists if all of its items are older)
        now: Reference time for ``days`` (defaults to current UTC time)
    """
    all_vendor_items = [it for it in items if it.publisher and normalize(it.publisher) == slug]
    if not all_vendor_items:
        return None

    window = all_vendor_items
    if days is not None:
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        window = [it for it in all_vendor_items if it.created_at is not None and it.created_at >= cutoff]

    vendor_tags = {tag for it in window for tag in it.tags}

    return VendorPage(
        name=str(all_vendor_items[0].publisher),
        slug=slug,
        full_path=f"{VENDORS_ROOT}/{slug}",
        total_count=len(all_vendor_items),
        items=window,
        top_categories=count_tags(window, VENDOR_TOP_CATEGORIES_LIMIT),
        related_vendors=_related_vendors(slug, items, vendor_tags),
        reports=_reports(window),
    )
