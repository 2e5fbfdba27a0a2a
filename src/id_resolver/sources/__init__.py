"""
Resolver source adapters.

Each external database registers one adapter instance here, keyed by its
source_key. The factory looks adapters up by name, so adding a source means
adding an adapter and registering it; the resolver itself does not change.

Supported sources:
- zfin: ZFIN zebrafish gene ids and synonyms
"""

from .base import SourceAdapter, TabDelimitedSynonymAdapter
from .zfin import ZfinAdapter

SOURCES: dict[str, SourceAdapter] = {}


def register_source(adapter: SourceAdapter) -> SourceAdapter:
    """Register an adapter under its source_key, replacing any previous one."""
    SOURCES[adapter.source_key] = adapter
    return adapter


def get_source(name: str) -> SourceAdapter:
    """
    Look up a registered adapter.

    Raises:
        KeyError: no adapter is registered under name
    """
    try:
        return SOURCES[name]
    except KeyError:
        known = ", ".join(sorted(SOURCES)) or "none"
        raise KeyError(f"Unknown resolver source {name!r} (registered: {known})") from None


register_source(ZfinAdapter())

__all__ = [
    "SOURCES",
    "SourceAdapter",
    "TabDelimitedSynonymAdapter",
    "ZfinAdapter",
    "get_source",
    "register_source",
]
