"""Taxonomy data model: parent categories, subcategories and their synonyms."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.errors import TaxonomyValidationError
from domain.taxonomy.slugs import is_slug


class Subcategory(BaseModel):
    """Child category with its canonical slug and alternate (synonym) slugs."""

    model_config = ConfigDict(frozen=True)

    name: str
    slug: str
    synonyms: tuple[str, ...] = ()

    @field_validator("synonyms", mode="before")
    @classmethod
    def _none_is_empty(cls, v: object) -> object:
        return () if v is None else v

    @property
    def matching_slugs(self) -> tuple[str, ...]:
        """Canonical slug first, then synonyms (duplicates dropped, order kept)."""
        return tuple(dict.fromkeys((self.slug, *self.synonyms)))


class Category(BaseModel):
    """Top-level category."""

    model_config = ConfigDict(frozen=True)

    name: str
    slug: str
    subcategories: tuple[Subcategory, ...] = ()

    @field_validator("subcategories", mode="before")
    @classmethod
    def _none_is_empty(cls, v: object) -> object:
        return () if v is None else v

    @property
    def full_path(self) -> str:
        return f"/categories/{self.slug}"

    def child_path(self, sub: Subcategory) -> str:
        return f"/categories/{self.slug}/{sub.slug}"


class Taxonomy(BaseModel):
    """Read-only two-level category catalog, built once at start-up."""

    model_config = ConfigDict(frozen=True)

    categories: tuple[Category, ...] = Field(default_factory=tuple)

    def find_problems(self) -> list[str]:
        """
        Return every ambiguity or formatting problem in the catalog.

        Checked:
          - names are non-empty
          - every slug and synonym is already in normalized form
          - parent slugs are unique
          - no slug/synonym is shared by two subcategories (anywhere)
          - no subcategory slug/synonym shadows a parent slug
        """
        problems: list[str] = []
        parent_slugs: dict[str, str] = {}
        child_owner: dict[str, str] = {}

        for parent in self.categories:
            if not parent.name.strip():
                problems.append(f"category {parent.slug!r} has an empty name")
            if not is_slug(parent.slug):
                problems.append(f"category slug {parent.slug!r} is not a normalized slug")
            if parent.slug in parent_slugs:
                problems.append(f"duplicate category slug {parent.slug!r}")
            parent_slugs[parent.slug] = parent.name

        for parent in self.categories:
            for sub in parent.subcategories:
                owner = f"{parent.slug}/{sub.slug}"
                if not sub.name.strip():
                    problems.append(f"subcategory {owner!r} has an empty name")
                for slug in sub.matching_slugs:
                    if not is_slug(slug):
                        problems.append(f"{owner!r}: slug/synonym {slug!r} is not a normalized slug")
                        continue
                    if slug in parent_slugs:
                        problems.append(f"{owner!r}: slug/synonym {slug!r} collides with a category slug")
                    if slug in child_owner:
                        problems.append(f"slug/synonym {slug!r} is shared by {child_owner[slug]!r} and {owner!r}")
                    else:
                        child_owner[slug] = owner

        return problems

    def validated(self) -> "Taxonomy":
        """Return self, or raise TaxonomyValidationError listing all problems."""
        problems = self.find_problems()
        if problems:
            raise TaxonomyValidationError(problems)
        return self
