"""Pydantic models for statistics records and the small count/link rows built from them."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaggedItem(BaseModel):
    """Single statistic record as returned by the stats API."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    title: str = ""
    tags: list[str] = Field(
        default_factory=list,
        description="Free-text tags exactly as stored upstream (not slugified).",
    )
    publisher: str | None = None
    created_at: datetime | None = None
    published_on: datetime | None = None
    link: str | None = None
    source_name: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, (list, tuple)):
            return [str(t) for t in v if t is not None and str(t).strip()]
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _none_title(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("publisher", "link", "source_name", mode="before")
    @classmethod
    def _blank_is_none(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("created_at", "published_on", mode="before")
    @classmethod
    def _blank_date_is_none(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("created_at", "published_on", mode="after")
    @classmethod
    def _assume_utc(cls, v: datetime | None) -> datetime | None:
        # Naive and aware timestamps must stay comparable.
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class NamedCount(BaseModel):
    """A display name with how many items carry it (vendors, tags)."""

    name: str
    count: int


class CategoryLink(BaseModel):
    """Navigation entry pointing at a category page."""

    name: str
    slug: str
    full_path: str
    count: int
