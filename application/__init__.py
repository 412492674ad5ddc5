"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
turning a loaded Site plus fetched items into render-ready page models.

This module exposes the entry points for category routing, vendor pages and the sitemap.
"""

from application.pages import (
    CategoryIndex,
    CategoryIndexEntry,
    CategoryPage,
    NotFound,
    PageKind,
    build_category_index,
    build_category_page,
    route_category_request,
    merge_items,
    serve_category_request,
    tag_queries,
)
from application.sitemap import SitemapEntry, build_sitemap
from application.vendors import VendorPage, VendorSummary, build_vendor_index, build_vendor_page

__all__ = [
    # Category routing (most commonly used)
    "route_category_request",
    "serve_category_request",
    "tag_queries",
    "merge_items",
    "build_category_page",
    "build_category_index",
    "CategoryPage",
    "CategoryIndex",
    "CategoryIndexEntry",
    "NotFound",
    "PageKind",
    # Vendors
    "build_vendor_index",
    "build_vendor_page",
    "VendorSummary",
    "VendorPage",
    # Sitemap
    "build_sitemap",
    "SitemapEntry",
]
