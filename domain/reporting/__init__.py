"""
Reporting: taxonomy coverage tables built with pandas.

compute_* functions are pure; the *_and_save helper writes CSV files.
"""

from domain.reporting.tables import (
    compute_coverage_tables_and_save,
    compute_taxonomy_coverage_table,
    compute_untracked_tags_table,
)

__all__ = [
    "compute_taxonomy_coverage_table",
    "compute_untracked_tags_table",
    "compute_coverage_tables_and_save",
]
