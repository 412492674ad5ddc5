"""
Category taxonomy: slugs, catalog model, resolution and redirects.

This module handles the Cyberstats category taxonomy.
All functions in this module are pure (no file I/O).
"""

from domain.taxonomy.loader import parse_category_overrides, parse_legacy_redirects, parse_taxonomy_config
from domain.taxonomy.models import Category, Subcategory, Taxonomy
from domain.taxonomy.redirects import (
    PERMANENT_REDIRECT,
    RedirectDecider,
    RedirectSource,
    RedirectTarget,
    bare_path,
    split_category_path,
)
from domain.taxonomy.resolver import CATEGORIES_ROOT, ResolutionKind, ResolvedCategory, TaxonomyResolver
from domain.taxonomy.slugs import normalize, slug_to_title, title_slug

__all__ = [
    # Model
    "Taxonomy",
    "Category",
    "Subcategory",
    # Parsing
    "parse_taxonomy_config",
    "parse_legacy_redirects",
    "parse_category_overrides",
    # Slugs
    "normalize",
    "title_slug",
    "slug_to_title",
    # Resolution
    "TaxonomyResolver",
    "ResolvedCategory",
    "ResolutionKind",
    "CATEGORIES_ROOT",
    # Redirects
    "RedirectDecider",
    "RedirectTarget",
    "RedirectSource",
    "PERMANENT_REDIRECT",
    "bare_path",
    "split_category_path",
]
