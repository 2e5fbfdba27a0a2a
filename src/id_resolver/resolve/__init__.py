"""
Identifier resolution core.

Resolves organism-specific identifiers and synonyms to canonical ids:
- SynonymIndex: canonical id ↔ synonyms for one partition
- IdResolver: partitions keyed by (taxon id, feature class)
- save_cache / restore_cache: flat-file persistence between runs
"""

from .cache import restore_cache, save_cache
from .index import SynonymIndex
from .resolver import IdResolver, PartitionKey, PartitionState

__all__ = [
    "IdResolver",
    "PartitionKey",
    "PartitionState",
    "SynonymIndex",
    "restore_cache",
    "save_cache",
]
