import logging

from infrastructure.config.models import StatsSourceKind

from .base import StatsSource

logger = logging.getLogger(__name__)

# Source kind -> StatsSource class
_SOURCE_REGISTRY: dict[StatsSourceKind, type[StatsSource]] = {}


def register_source(kind: StatsSourceKind, source_cls: type[StatsSource], *, override: bool = False) -> None:
    """Register a source class for a kind.

    This is the plugin hook: source modules call this at import time.
    """
    if (kind in _SOURCE_REGISTRY) and not override:
        existing = _SOURCE_REGISTRY[kind]
        raise RuntimeError(
            f"Source already registered for kind={kind.value}: {existing.__name__}. Use override=True to replace."
        )
    _SOURCE_REGISTRY[kind] = source_cls
    logger.debug("Registered stats source for kind=%s: %s", kind.value, source_cls.__name__)


def get_source_class(kind: StatsSourceKind) -> type[StatsSource] | None:
    """Return the registered source class (or None if not registered yet)."""
    return _SOURCE_REGISTRY.get(kind)
