"""Application-level constants."""

from pathlib import Path

# Category pages
TOP_VENDORS_LIMIT = 10
RELATED_CATEGORIES_LIMIT = 8
CATEGORY_INDEX_MIN_COUNT = 3

# SEO meta descriptions
META_DESCRIPTION_MAX_CHARS = 160
META_DESCRIPTION_MIN_CHARS = 50
META_DESCRIPTION_SUFFIX = " Updated regularly with latest research."

# Vendor pages
VENDOR_TOP_CATEGORIES_LIMIT = 8
RELATED_VENDORS_LIMIT = 6
VENDOR_REPORTS_LIMIT = 10

# Sitemap: (path, change frequency, priority)
STATIC_SITEMAP_PAGES: list[tuple[str, str, float]] = [
    ("", "daily", 1.0),
    ("/categories", "daily", 0.95),
    ("/vendors", "daily", 0.95),
    ("/search", "daily", 0.85),
    ("/newsletter", "monthly", 0.6),
    ("/privacy", "monthly", 0.5),
    ("/terms", "monthly", 0.5),
]
VENDOR_SITEMAP_PRIORITY = 0.9
CATEGORY_SITEMAP_PRIORITY = 0.9
STAT_SITEMAP_PRIORITY = 0.6

# Output files (CLI)
OUTPUT_ROOT = Path("outputs")
COVERAGE_FILENAME = "taxonomy_coverage.csv"
UNTRACKED_TAGS_FILENAME = "untracked_tags.csv"
LOG_FILENAME = "cyberstats.log"
