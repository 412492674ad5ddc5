"""Taxonomy coverage tables for editors."""

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from domain.schemas import TaggedItem
from domain.taxonomy.models import Taxonomy
from domain.taxonomy.slugs import normalize

COVERAGE_COLUMNS = ["Category", "Sub-category", "Slug", "Matching slugs", "Item count"]
UNTRACKED_COLUMNS = ["Tag slug", "Most common spelling", "Item count"]


def _tag_frame(items: Sequence[TaggedItem]) -> pd.DataFrame:
    """One row per (item, tag) with the normalized slug."""
    rows = [
        {"item": idx, "tag": tag, "slug": normalize(tag)}
        for idx, item in enumerate(items)
        for tag in item.tags
    ]
    df = pd.DataFrame(rows, columns=["item", "tag", "slug"])
    return df[df["slug"] != ""]


def compute_taxonomy_coverage_table(taxonomy: Taxonomy, items: Sequence[TaggedItem]) -> pd.DataFrame:
    """
    Build a table of how many items each subcategory would aggregate.

    Columns in the result:
      - Category: parent category name
      - Sub-category: subcategory name
      - Slug: canonical two-segment slug path
      - Matching slugs: slug + synonyms, comma separated
      - Item count: distinct items with at least one matching tag

    Rows follow taxonomy order. Subcategories with zero items are kept so
    editors can spot dead entries.
    """
    tags_df = _tag_frame(items)

    rows: list[dict[str, object]] = []
    for parent in taxonomy.categories:
        for sub in parent.subcategories:
            mask = tags_df["slug"].isin(sub.matching_slugs)
            rows.append(
                {
                    "Category": parent.name,
                    "Sub-category": sub.name,
                    "Slug": f"{parent.slug}/{sub.slug}",
                    "Matching slugs": ", ".join(sub.matching_slugs),
                    "Item count": int(tags_df.loc[mask, "item"].nunique()),
                }
            )

    if not rows:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    return pd.DataFrame(rows, columns=COVERAGE_COLUMNS)


def compute_untracked_tags_table(
    taxonomy: Taxonomy,
    items: Sequence[TaggedItem],
    min_count: int = 1,
) -> pd.DataFrame:
    """
    Tag slugs present in the data but unknown to the taxonomy, most frequent first.

    "Most common spelling" is the raw tag text seen most often for that slug,
    which is what an editor would copy into a new subcategory name.
    """
    known: set[str] = set()
    for parent in taxonomy.categories:
        known.add(parent.slug)
        for sub in parent.subcategories:
            known.update(sub.matching_slugs)

    tags_df = _tag_frame(items)
    tags_df = tags_df[~tags_df["slug"].isin(known)]
    if tags_df.empty:
        return pd.DataFrame(columns=UNTRACKED_COLUMNS)

    counts = tags_df.groupby("slug")["item"].nunique()
    spelling = tags_df.groupby("slug")["tag"].agg(lambda s: s.value_counts().index[0])

    result = pd.DataFrame(
        {
            "Tag slug": counts.index,
            "Most common spelling": spelling.reindex(counts.index).values,
            "Item count": counts.values.astype(int),
        }
    )
    result = result[result["Item count"] >= min_count]
    return result.sort_values(["Item count", "Tag slug"], ascending=[False, True]).reset_index(drop=True)


def compute_coverage_tables_and_save(
    taxonomy: Taxonomy,
    items: Sequence[TaggedItem],
    output_dir: Path,
    coverage_filename: str,
    untracked_filename: str,
    min_count: int = 1,
) -> tuple[Path, Path]:
    """
    Convenience wrapper: compute both coverage tables and save them as CSV.

    Returns:
        Paths of the coverage CSV and the untracked-tags CSV
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    coverage_path = output_dir / coverage_filename
    untracked_path = output_dir / untracked_filename
    compute_taxonomy_coverage_table(taxonomy, items).to_csv(coverage_path, index=False)
    compute_untracked_tags_table(taxonomy, items, min_count=min_count).to_csv(untracked_path, index=False)
    return coverage_path, untracked_path
