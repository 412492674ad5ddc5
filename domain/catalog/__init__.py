"""
Catalog: grouping tagged statistics under categories and vendors.

All functions are pure; items are never mutated or stored.
"""

from domain.catalog.aggregation import (
    aggregate,
    count_publishers,
    count_tags,
    item_matches,
    related_tag_counts,
    subcategory_counts,
)

__all__ = [
    "aggregate",
    "item_matches",
    "subcategory_counts",
    "count_publishers",
    "count_tags",
    "related_tag_counts",
]
