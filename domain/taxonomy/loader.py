"""Parse taxonomy, legacy redirect and override configuration from loaded YAML/JSON dicts."""

from typing import Any

from pydantic import ValidationError

from domain.taxonomy.models import Taxonomy


def parse_taxonomy_config(data: dict[str, Any]) -> Taxonomy:
    """
    Parse a pre-loaded dict into a validated Taxonomy.

    This is a pure function - it does NOT perform file I/O.
    The YAML loading happens in infrastructure.config.loader.

    Args:
        data: Dictionary from yaml.safe_load() with a ``categories`` list

    Returns:
        Taxonomy with unique, normalized slugs

    Raises:
        ValueError: If required keys are missing or have wrong types
        TaxonomyValidationError: If slugs/synonyms are ambiguous or not normalized
    """
    categories = data.get("categories", []) or []
    if not isinstance(categories, list):
        raise ValueError("categories must be a list")

    try:
        taxonomy = Taxonomy.model_validate({"categories": categories})
    except ValidationError as e:
        raise ValueError(f"Invalid taxonomy structure: {e}") from e

    return taxonomy.validated()


def _strip_slug_path(value: object) -> str:
    return str(value).strip().strip("/")


def parse_legacy_redirects(data: dict[str, Any]) -> dict[str, str]:
    """
    Parse the legacy redirect table (``from slug path -> to slug path``).

    Accepts either ``{"redirects": {...}}`` or a bare mapping. Leading/trailing
    slashes are dropped so ``"/threats/malware/"`` and ``"threats/malware"`` are
    the same key.
    """
    raw = (data["redirects"] if "redirects" in data else data) or {}
    if not isinstance(raw, dict):
        raise ValueError("redirects must be a mapping")

    redirects: dict[str, str] = {}
    for src, dst in raw.items():
        key = _strip_slug_path(src)
        target = _strip_slug_path(dst) if dst is not None else ""
        if not key or not target:
            raise ValueError(f"Empty legacy redirect entry: {src!r} -> {dst!r}")
        if key in redirects:
            raise ValueError(f"Duplicate legacy redirect key after normalization: {key!r}")
        redirects[key] = target
    return redirects


def parse_category_overrides(data: dict[str, Any]) -> dict[str, str]:
    """
    Parse editor-maintained category descriptions into ``slug path -> description``.

    Entries without a description are ignored.
    """
    entries = data.get("overrides", []) or []
    if not isinstance(entries, list):
        raise ValueError("overrides must be a list")

    overrides: dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, dict) or "slug" not in entry:
            raise ValueError(f"Override entry must be a mapping with a 'slug': {entry!r}")
        description = entry.get("custom_description") or entry.get("customDescription")
        if description and str(description).strip():
            overrides[_strip_slug_path(entry["slug"])] = str(description).strip()
    return overrides
