"""Category page models and request routing."""

import logging
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from application.constants import (
    CATEGORY_INDEX_MIN_COUNT,
    META_DESCRIPTION_MAX_CHARS,
    META_DESCRIPTION_MIN_CHARS,
    META_DESCRIPTION_SUFFIX,
    RELATED_CATEGORIES_LIMIT,
    TOP_VENDORS_LIMIT,
)
from domain.catalog import aggregate, count_publishers, related_tag_counts, subcategory_counts
from domain.schemas import CategoryLink, NamedCount, TaggedItem
from domain.site import Site
from domain.taxonomy import (
    CATEGORIES_ROOT,
    RedirectTarget,
    ResolutionKind,
    TaxonomyResolver,
    bare_path,
    normalize,
    slug_to_title,
    split_category_path,
)
from infrastructure.observability import request_log_context
from infrastructure.sources import StatsSource

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class PageKind(str, Enum):
    """What a category page is built from."""

    PARENT = "parent"
    CHILD = "child"
    TAG = "tag"  # flat tag page, not modelled in the taxonomy


class ParentLink(BaseModel):
    name: str
    slug: str
    full_path: str


class CategoryPage(BaseModel):
    """Everything a template needs to render one category page."""

    kind: PageKind
    name: str
    slug: str
    full_path: str
    title: str
    description: str
    meta_description: str
    items: list[TaggedItem] = Field(default_factory=list)
    top_vendors: list[NamedCount] = Field(default_factory=list)
    related_categories: list[CategoryLink] = Field(default_factory=list)
    subcategories: list[CategoryLink] = Field(default_factory=list)
    parent: ParentLink | None = None

    @property
    def is_parent(self) -> bool:
        return self.kind is PageKind.PARENT


class CategoryIndexEntry(BaseModel):
    name: str
    slug: str
    full_path: str
    count: int
    description: str


class CategoryIndex(BaseModel):
    """The /categories listing."""

    entries: list[CategoryIndexEntry] = Field(default_factory=list)


class NotFound(BaseModel):
    """Nothing to render; the web layer answers 404."""

    path: str
    status_code: int = 404
    message: str = "The requested topic could not be found."


def _category_description(name: str, n_items: int, vendors: list[NamedCount], parent: ParentLink | None) -> str:
    top = ", ".join(v.name for v in vendors[:3])
    if parent is not None:
        text = f"Explore {n_items} cybersecurity statistics about {name.lower()} in {parent.name}."
        if top:
            text += f" Published by {top}."
    else:
        text = f"Explore {n_items} cybersecurity statistics about {name.lower()}."
        if top:
            text += f" Published by leading vendors including {top}."
    return text


def meta_description(text: str) -> str:
    """Pad short descriptions and cap at 160 characters."""
    if len(text) < META_DESCRIPTION_MIN_CHARS:
        text = f"{text}{META_DESCRIPTION_SUFFIX}"
    return text[:META_DESCRIPTION_MAX_CHARS]


def _name_from_items(items: Sequence[TaggedItem], slug: str) -> str | None:
    """Exact tag spelling from the data, for tag pages outside the taxonomy."""
    for item in items:
        for tag in item.tags:
            if normalize(tag) == slug:
                return tag
    return None


def _related_links(resolver: TaxonomyResolver, counts: list[NamedCount]) -> list[CategoryLink]:
    links: list[CategoryLink] = []
    for nc in counts:
        slug = normalize(nc.name)
        links.append(
            CategoryLink(
                name=nc.name,
                slug=slug,
                full_path=resolver.canonical_path_for_slug(slug),
                count=nc.count,
            )
        )
    return links


def build_category_page(
    site: Site,
    slug_path: Sequence[str],
    items: Sequence[TaggedItem],
    broader_items: Sequence[TaggedItem] | None = None,
) -> CategoryPage | None:
    """
    Build the page model for a category slug path, or None if there is nothing to show.

    Args:
        site: Loaded site bundle (resolver, overrides)
        slug_path: One or two slug segments (as in the URL)
        items: Items to aggregate for this page
        broader_items: Wider item window for related categories and subcategory
            counts (defaults to items)

    Returns:
        CategoryPage, or None when the path is unknown or no item matches
    """
    segments = tuple(slug_path)
    if not segments or len(segments) > 2:
        return None

    resolver = site.resolver
    resolved = resolver.resolve_by_slug_path(segments)
    if resolved is None and len(segments) == 2:
        # Two-segment paths only exist for taxonomy subcategories.
        return None

    slug = segments[-1]
    matching = resolved.matching_slugs if resolved is not None else (slug,)
    page_items = aggregate(items, matching)
    if not page_items:
        logger.info("No items for %s (matching=%s)", "/".join(segments), ", ".join(matching))
        return None

    broader = items if broader_items is None else broader_items

    if resolved is not None:
        name = resolved.name
        slug = resolved.slug
        full_path = resolved.canonical_path
        kind = PageKind(resolved.kind.value)
    else:
        name = _name_from_items(page_items, slug) or slug_to_title(slug)
        full_path = f"{CATEGORIES_ROOT}/{slug}"
        kind = PageKind.TAG

    parent: ParentLink | None = None
    subcategories: list[CategoryLink] = []
    if resolved is not None and resolved.kind is ResolutionKind.PARENT:
        subcategories = subcategory_counts(resolved.category, broader)
    elif resolved is not None and resolved.parent is not None:
        parent = ParentLink(
            name=resolved.parent.name,
            slug=resolved.parent.slug,
            full_path=resolved.parent.full_path,
        )

    top_vendors = count_publishers(page_items, TOP_VENDORS_LIMIT)
    related = _related_links(resolver, related_tag_counts(broader, matching, name, RELATED_CATEGORIES_LIMIT))

    override_key = full_path[len(CATEGORIES_ROOT) + 1 :]
    description = site.category_overrides.get(override_key) or _category_description(
        name, len(page_items), top_vendors, parent
    )
    if parent is not None:
        title = f"{name} in {parent.name} | {site.site_name}"
    else:
        title = f"{name} Statistics | {site.site_name}"

    return CategoryPage(
        kind=kind,
        name=name,
        slug=slug,
        full_path=full_path,
        title=title,
        description=description,
        meta_description=meta_description(description),
        items=page_items,
        top_vendors=top_vendors,
        related_categories=related,
        subcategories=subcategories,
        parent=parent,
    )


def build_category_index(
    items: Sequence[TaggedItem],
    *,
    min_count: int = CATEGORY_INDEX_MIN_COUNT,
    resolver: TaxonomyResolver | None = None,
) -> CategoryIndex:
    """
    Topic listing: every tag slug carried by at least ``min_count`` items.

    Spellings that normalize to the same slug ("MFA", "mfa") are merged; the
    most frequent spelling is displayed. Entries are sorted by name, ignoring case.
    """
    item_counts: Counter = Counter()
    spellings: dict[str, Counter] = defaultdict(Counter)
    for item in items:
        seen: set[str] = set()
        for tag in item.tags:
            slug = normalize(tag)
            if not slug:
                continue
            spellings[slug][tag] += 1
            if slug not in seen:
                item_counts[slug] += 1
                seen.add(slug)

    entries: list[CategoryIndexEntry] = []
    for slug, count in item_counts.items():
        if count < min_count:
            continue
        name = spellings[slug].most_common(1)[0][0]
        entries.append(
            CategoryIndexEntry(
                name=name,
                slug=slug,
                full_path=resolver.canonical_path_for_slug(slug) if resolver else f"{CATEGORIES_ROOT}/{slug}",
                count=count,
                description=f"Cybersecurity statistics about {name.lower()}",
            )
        )
    entries.sort(key=lambda e: (e.name.casefold(), e.slug))
    return CategoryIndex(entries=entries)


def _render_category_request(
    site: Site,
    request_path: str,
    items: Sequence[TaggedItem],
    broader_items: Sequence[TaggedItem] | None,
    min_count: int,
) -> CategoryPage | CategoryIndex | NotFound:
    segments = split_category_path(request_path)
    if segments is None:
        if bare_path(request_path) == CATEGORIES_ROOT:
            return build_category_index(items, min_count=min_count, resolver=site.resolver)
        return NotFound(path=request_path)

    page = build_category_page(site, segments, items, broader_items)
    if page is None:
        return NotFound(path=request_path)
    return page


def route_category_request(
    site: Site,
    request_path: str,
    items: Sequence[TaggedItem],
    *,
    broader_items: Sequence[TaggedItem] | None = None,
    min_count: int = CATEGORY_INDEX_MIN_COUNT,
) -> RedirectTarget | CategoryPage | CategoryIndex | NotFound:
    """
    Decide what a ``/categories`` request renders.

    Redirects are checked before anything else so that synonym and legacy URLs
    never render as duplicate pages.
    """
    redirect = site.redirects.decide_redirect(request_path)
    if redirect is not None:
        logger.info("301 %s -> %s (%s)", request_path, redirect.location, redirect.source.value)
        return redirect
    return _render_category_request(site, request_path, items, broader_items, min_count)


def tag_queries(resolver: TaxonomyResolver, slug_path: Sequence[str]) -> list[str]:
    """
    Tag filters to send to the stats source for one category page.

    A taxonomy category is queried by its display name and then by every
    matching slug the name does not already cover. A flat tag is queried by
    its slug. Unknown two-segment paths need no query.
    """
    segments = tuple(slug_path)
    if not segments or len(segments) > 2:
        return []
    resolved = resolver.resolve_by_slug_path(segments)
    if resolved is None:
        return [] if len(segments) == 2 else [segments[0]]
    name_slug = normalize(resolved.name)
    return [resolved.name] + [s for s in resolved.matching_slugs if s != name_slug]


def merge_items(batches: Iterable[Sequence[TaggedItem]]) -> list[TaggedItem]:
    """
    Merge per-tag fetches into one list: duplicates (same id) dropped, newest first.

    Items without ``created_at`` go last; ties keep fetch order.
    """
    merged: dict[object, TaggedItem] = {}
    for batch in batches:
        for item in batch:
            key = item.id if item.id is not None else (item.title, item.link)
            merged.setdefault(key, item)
    return sorted(merged.values(), key=lambda it: it.created_at or _OLDEST, reverse=True)


def serve_category_request(
    site: Site,
    source: StatsSource,
    request_path: str,
    *,
    limit: int,
    min_count: int = CATEGORY_INDEX_MIN_COUNT,
) -> RedirectTarget | CategoryPage | CategoryIndex | NotFound:
    """
    Route a request, fetching items only when something has to be rendered.

    Page items come from tag-filtered fetches (one per entry of ``tag_queries``)
    so a category is found however old its items are. One unfiltered fetch of
    ``limit`` items is the broader window for related categories, subcategory
    counts and the index.
    """
    with request_log_context(request_path):
        redirect = site.redirects.decide_redirect(request_path)
        if redirect is not None:
            logger.info("301 %s -> %s (%s)", request_path, redirect.location, redirect.source.value)
            return redirect

        segments = split_category_path(request_path)
        if segments is None:
            if bare_path(request_path) != CATEGORIES_ROOT:
                return NotFound(path=request_path)
            return _render_category_request(site, request_path, source.fetch_items(limit=limit), None, min_count)

        queries = tag_queries(site.resolver, segments)
        if not queries:
            return NotFound(path=request_path)
        items = merge_items(source.fetch_items(limit=limit, tag=q) for q in queries)
        broader = source.fetch_items(limit=limit)
        return _render_category_request(site, request_path, items, broader, min_count)
