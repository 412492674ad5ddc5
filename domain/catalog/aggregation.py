"""Grouping and counting of tagged items under categories and publishers."""

from collections import Counter
from collections.abc import Collection, Iterable, Sequence

from domain.schemas import CategoryLink, NamedCount, TaggedItem
from domain.taxonomy.models import Category
from domain.taxonomy.slugs import normalize


def item_matches(item: TaggedItem, matching_slugs: Collection[str]) -> bool:
    """True if any of the item's tags normalizes to one of matching_slugs."""
    return any(normalize(tag) in matching_slugs for tag in item.tags)


def aggregate(items: Iterable[TaggedItem], matching_slugs: Collection[str]) -> list[TaggedItem]:
    """
    Items belonging to a category, in their original order.

    Args:
        items: Tagged items from the stats source
        matching_slugs: ``ResolvedCategory.matching_slugs`` (or a single flat tag slug)

    Returns:
        Items with at least one tag whose slug is in matching_slugs
    """
    wanted = frozenset(matching_slugs)
    return [item for item in items if item_matches(item, wanted)]


def subcategory_counts(parent: Category, items: Sequence[TaggedItem]) -> list[CategoryLink]:
    """
    Per-subcategory item counts for a parent category page.

    Each child is aggregated with its own matching slugs (slug + synonyms), so
    an item is counted once per child even if it carries several synonyms.
    Children with no items are left out; order follows the taxonomy.
    """
    links: list[CategoryLink] = []
    for sub in parent.subcategories:
        count = len(aggregate(items, sub.matching_slugs))
        if count > 0:
            links.append(
                CategoryLink(
                    name=sub.name,
                    slug=sub.slug,
                    full_path=parent.child_path(sub),
                    count=count,
                )
            )
    return links


def _most_common(counter: Counter, limit: int | None) -> list[NamedCount]:
    # Counter.most_common keeps first-seen order for ties.
    return [NamedCount(name=name, count=count) for name, count in counter.most_common(limit)]


def count_publishers(items: Iterable[TaggedItem], limit: int | None = None) -> list[NamedCount]:
    """Publisher counts, most frequent first."""
    counter: Counter = Counter(item.publisher for item in items if item.publisher)
    return _most_common(counter, limit)


def count_tags(items: Iterable[TaggedItem], limit: int | None = None) -> list[NamedCount]:
    """Raw tag counts (exact spelling), most frequent first."""
    counter: Counter = Counter(tag for item in items for tag in item.tags)
    return _most_common(counter, limit)


def related_tag_counts(
    items: Iterable[TaggedItem],
    matching_slugs: Collection[str],
    category_name: str,
    limit: int | None = 8,
) -> list[NamedCount]:
    """
    Tags that co-occur with a category, most frequent first.

    A tag counts when its slug is outside matching_slugs and either its text
    contains the category name (case-insensitive) or its item carries one of
    the category's tags. Tags that normalize to an empty slug are skipped.
    """
    wanted = frozenset(matching_slugs)
    name_lower = category_name.lower()
    counter: Counter = Counter()
    for item in items:
        in_category = item_matches(item, wanted)
        for tag in item.tags:
            slug = normalize(tag)
            if not slug or slug in wanted:
                continue
            if in_category or (name_lower and name_lower in tag.lower()):
                counter[tag] += 1
    return _most_common(counter, limit)
