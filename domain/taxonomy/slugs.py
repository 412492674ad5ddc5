"""Slug derivation for tags, publishers, category names and stat titles."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_NON_ALNUM_RUN_RE = re.compile(r"[^a-z0-9]+")

TITLE_SLUG_MAX_LENGTH = 100


def normalize(text: object) -> str:
    """
    Convert free text into a URL-safe slug.

    Lowercases, turns whitespace runs into a single hyphen, drops everything
    outside ``[a-z0-9-]`` and collapses/trims hyphens. Idempotent and total:
    ``None`` (or anything that is not text) never raises.

    Examples:
        >>> normalize("Multi Factor Authentication")
        'multi-factor-authentication'
        >>> normalize("Identity & Access")
        'identity-access'
        >>> normalize("  --2FA--  ")
        '2fa'
    """
    if text is None:
        return ""
    s = str(text).lower()
    s = _WHITESPACE_RE.sub("-", s)
    s = _DISALLOWED_RE.sub("", s)
    s = _HYPHEN_RUN_RE.sub("-", s)
    return s.strip("-")


def is_slug(value: str) -> bool:
    """True if value is a non-empty slug already in normalized form."""
    return bool(value) and normalize(value) == value


def title_slug(title: object, max_length: int = TITLE_SLUG_MAX_LENGTH) -> str:
    """Slug used for stat detail URLs: non-alphanumeric runs become a hyphen, capped in length."""
    if title is None:
        return ""
    s = _NON_ALNUM_RUN_RE.sub("-", str(title).lower()).strip("-")
    return s[:max_length].rstrip("-")


def slug_to_title(slug: str) -> str:
    """Best-effort display name for a slug that is not in the taxonomy ("dating-platforms" -> "Dating Platforms")."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in slug.split("-") if word)
