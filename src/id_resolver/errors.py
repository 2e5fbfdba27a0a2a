"""
Exception types raised by the resolver.

Data-integrity problems (conflicting synonyms, unknown partitions) propagate
to the caller. Cache corruption is raised by the cache reader and recovered by
the factory, which rebuilds from the raw source instead.
"""

from pathlib import Path


class IdResolverError(Exception):
    """Base class for id_resolver errors."""


class ConflictError(IdResolverError):
    """A synonym is already bound to a different canonical id in the partition."""

    def __init__(self, synonym: str, existing: str, incoming: str):
        self.synonym = synonym
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Synonym {synonym!r} is bound to {existing!r}, cannot also bind it to {incoming!r}"
        )


class UnknownPartitionError(IdResolverError, KeyError):
    """The requested (taxon, feature class) partition was never created."""

    def __init__(self, taxon_id: str, feature_class: str):
        self.taxon_id = taxon_id
        self.feature_class = feature_class
        super().__init__(f"No partition for taxon {taxon_id} / {feature_class}")

    def __str__(self) -> str:
        return self.args[0]


class PartitionCompleteError(IdResolverError):
    """A complete partition was mutated."""


class PartitionBusyError(IdResolverError):
    """A partition is already being populated and cannot be populated again."""

    def __init__(self, taxon_id: str, feature_class: str):
        self.taxon_id = taxon_id
        self.feature_class = feature_class
        super().__init__(f"Partition {taxon_id}/{feature_class} is already being populated")


class AmbiguousIdentifierError(IdResolverError):
    """An identifier resolved to more than one canonical id."""

    def __init__(self, identifier: str, matches: set[str]):
        self.identifier = identifier
        self.matches = matches
        super().__init__(f"{identifier!r} is ambiguous: {', '.join(sorted(matches))}")


class CacheCorruptError(IdResolverError):
    """The cache file could not be read or parsed."""

    def __init__(self, path: Path, reason: str, line_no: int | None = None):
        self.path = path
        self.reason = reason
        self.line_no = line_no
        where = f"{path}:{line_no}" if line_no is not None else str(path)
        super().__init__(f"Corrupt resolver cache {where}: {reason}")
