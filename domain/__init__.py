"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- schemas: Pydantic models for statistics records and count rows
- taxonomy: Slugs, category catalog, resolution and redirects
- catalog: Grouping items under categories and publishers
- reporting: Taxonomy coverage tables
"""

from domain.errors import RedirectConfigError, TaxonomyValidationError
from domain.schemas import CategoryLink, NamedCount, TaggedItem
from domain.site import Site

__all__ = [
    "TaggedItem",
    "NamedCount",
    "CategoryLink",
    "Site",
    "TaxonomyValidationError",
    "RedirectConfigError",
]
