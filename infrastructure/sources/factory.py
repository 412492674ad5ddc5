"""Factory for creating stats sources."""

import importlib
import logging
from pathlib import Path

from infrastructure.config.models import SiteConfig, StatsSourceKind

from .base import StatsSource
from .registry import get_source_class

logger = logging.getLogger(__name__)


def _ensure_source_imported(kind: StatsSourceKind) -> None:
    """
    Lazy-import the source module to trigger `register_source(...)`.

    Convention:
      - StatsSourceKind value MUST match module filename under infrastructure/sources/
        e.g., StatsSourceKind.HTTP.value == "http" -> infrastructure/sources/http.py
    """
    module_name = f"{__package__}.{kind.value}"
    try:
        importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        if getattr(e, "name", None) == module_name:
            raise RuntimeError(
                f"No source module found for kind='{kind.value}'. "
                f"Expected file: infrastructure/sources/{kind.value}.py"
            ) from e
        raise


def make_source(cfg: SiteConfig, *, snapshot: Path | None = None) -> StatsSource:
    """
    Factory function to create the configured stats source.
    Args:
        cfg: Site configuration containing source settings
        snapshot: If given, read this snapshot file regardless of cfg.source
    Returns:
        An instance of StatsSource for the selected kind.
    Raises:
        RuntimeError: If the kind has no registered source.
    """
    if snapshot is not None:
        cfg = cfg.model_copy(
            update={
                "source": StatsSourceKind.SNAPSHOT,
                "snapshot": cfg.snapshot.model_copy(update={"path": snapshot}),
            }
        )

    source_cls = get_source_class(cfg.source)
    if source_cls is None:
        _ensure_source_imported(cfg.source)
        source_cls = get_source_class(cfg.source)

    if source_cls is None:
        raise RuntimeError(
            f"Source '{cfg.source.value}' did not register a class. "
            f"Make sure {cfg.source.value}.py calls register_source(...)."
        )

    logger.debug("Using stats source: %s", source_cls.__name__)
    return source_cls.from_cfg(cfg)  # type: ignore[attr-defined]
