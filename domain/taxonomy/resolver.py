"""Resolve slug paths and raw tags to canonical taxonomy categories."""

import logging
from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

from domain.taxonomy.models import Category, Subcategory, Taxonomy
from domain.taxonomy.slugs import normalize

logger = logging.getLogger(__name__)

CATEGORIES_ROOT = "/categories"


class ResolutionKind(str, Enum):
    """Which level of the taxonomy a slug path resolved to."""

    PARENT = "parent"
    CHILD = "child"


class ResolvedCategory(BaseModel):
    """
    Canonical identity for a slug path.

    ``matching_slugs`` is what category pages aggregate on: an item belongs to
    the category if any of its normalized tags is a member.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResolutionKind
    category: Category | Subcategory
    parent: Category | None = None
    matching_slugs: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.category.name

    @property
    def slug(self) -> str:
        return self.category.slug

    @property
    def canonical_path(self) -> str:
        if self.parent is not None:
            return f"{CATEGORIES_ROOT}/{self.parent.slug}/{self.category.slug}"
        return f"{CATEGORIES_ROOT}/{self.category.slug}"


def _as_segments(path: Sequence[str] | str | None) -> tuple[str, ...]:
    if path is None:
        return ()
    if isinstance(path, str):
        return tuple(seg for seg in path.strip("/").split("/") if seg)
    return tuple(path)


class TaxonomyResolver:
    """
    Lookup over an immutable Taxonomy.

    Indexes are built once in the constructor; every lookup afterwards is a
    dict access and allocates only the result, so one instance can be shared
    by all request handlers.
    """

    def __init__(self, taxonomy: Taxonomy) -> None:
        self.taxonomy = taxonomy.validated()
        self._parents: dict[str, Category] = {c.slug: c for c in taxonomy.categories}
        self._children: dict[str, tuple[Category, Subcategory]] = {}
        for parent in taxonomy.categories:
            for sub in parent.subcategories:
                for slug in sub.matching_slugs:
                    self._children[slug] = (parent, sub)
        logger.debug(
            "Taxonomy indexed: %d categories, %d subcategory slugs/synonyms",
            len(self._parents),
            len(self._children),
        )

    def _parent_result(self, parent: Category) -> ResolvedCategory:
        return ResolvedCategory(
            kind=ResolutionKind.PARENT,
            category=parent,
            parent=None,
            matching_slugs=(parent.slug,),
        )

    def _child_result(self, parent: Category, sub: Subcategory) -> ResolvedCategory:
        return ResolvedCategory(
            kind=ResolutionKind.CHILD,
            category=sub,
            parent=parent,
            matching_slugs=sub.matching_slugs,
        )

    def resolve_by_slug_path(self, path: Sequence[str] | str) -> ResolvedCategory | None:
        """
        Resolve a one- or two-segment slug path. Returns None when nothing matches.

        One segment: a parent slug first, then any subcategory slug or synonym.
        Two segments: ``[parent, child]`` where child must be the exact
        subcategory slug; synonyms are not accepted in the second position.
        """
        segments = _as_segments(path)

        if len(segments) == 1:
            slug = segments[0]
            parent = self._parents.get(slug)
            if parent is not None:
                return self._parent_result(parent)
            hit = self._children.get(slug)
            if hit is not None:
                return self._child_result(*hit)
            return None

        if len(segments) == 2:
            parent = self._parents.get(segments[0])
            if parent is None:
                return None
            for sub in parent.subcategories:
                if sub.slug == segments[1]:
                    return self._child_result(parent, sub)
            return None

        return None

    def resolve_tag(self, tag: object) -> ResolvedCategory | None:
        """Resolve a raw, free-text tag ("Zero Trust", "ZTNA") by its slug."""
        slug = normalize(tag)
        if not slug:
            return None
        return self.resolve_by_slug_path((slug,))

    def canonical_path_for_slug(self, slug: str) -> str:
        """URL a single tag slug should link to, skipping the redirect hop for subcategories."""
        resolved = self.resolve_by_slug_path((slug,)) if slug else None
        if resolved is not None:
            return resolved.canonical_path
        return f"{CATEGORIES_ROOT}/{slug}"

    def known_slugs(self) -> frozenset[str]:
        """Every parent slug, subcategory slug and synonym."""
        return frozenset(self._parents) | frozenset(self._children)
