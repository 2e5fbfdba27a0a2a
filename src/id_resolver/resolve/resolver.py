"""
Identifier resolver.

Owns one SynonymIndex per (taxon id, feature class) partition and gates
population so each partition is built at most once per loading run:

    ABSENT → POPULATING → COMPLETE

Only COMPLETE partitions satisfy has_partition(). There is no way back from
COMPLETE; a complete partition is authoritative for the rest of the run.

Usage:
    resolver = IdResolver()
    resolver.add_main_ids("7955", "gene", "ZDB-GENE-010")
    resolver.add_synonyms("7955", "gene", "ZDB-GENE-010", {"abc1", "abc2"})
    resolver.mark_complete("7955", "gene")
    resolver.resolve("7955", "gene", "abc1")  # {"ZDB-GENE-010"}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from id_resolver.errors import (
    AmbiguousIdentifierError,
    PartitionCompleteError,
    UnknownPartitionError,
)
from id_resolver.resolve.index import SynonymIndex

logger = logging.getLogger(__name__)


class PartitionState(Enum):
    """Population state of a partition."""

    ABSENT = "absent"
    POPULATING = "populating"
    COMPLETE = "complete"


@dataclass(frozen=True, order=True)
class PartitionKey:
    """(taxon id, feature class) pair identifying one identifier namespace."""

    taxon_id: str
    feature_class: str

    @classmethod
    def of(cls, taxon_id: str | int, feature_class: str) -> PartitionKey:
        """Build a key, normalizing integer taxon ids to strings."""
        return cls(str(taxon_id).strip(), feature_class.strip())

    def __str__(self) -> str:
        return f"{self.taxon_id}/{self.feature_class}"


@dataclass
class _Partition:
    index: SynonymIndex
    state: PartitionState = PartitionState.POPULATING


class IdResolver:
    """Resolve identifiers and synonyms to canonical ids, per partition."""

    def __init__(self):
        self._partitions: dict[PartitionKey, _Partition] = {}

    # ------------------------------------------------------------------
    # Partition lifecycle
    # ------------------------------------------------------------------

    def has_partition(self, taxon_id: str | int, feature_class: str) -> bool:
        """True iff the partition exists and is complete."""
        return self.state(taxon_id, feature_class) is PartitionState.COMPLETE

    def has_partitions(self, taxon_id: str | int, feature_classes: Iterable[str]) -> bool:
        """True iff every listed feature class is complete for the taxon."""
        classes = list(feature_classes)
        return bool(classes) and all(self.has_partition(taxon_id, c) for c in classes)

    def state(self, taxon_id: str | int, feature_class: str) -> PartitionState:
        partition = self._partitions.get(PartitionKey.of(taxon_id, feature_class))
        return partition.state if partition else PartitionState.ABSENT

    def get_or_create_partition(self, taxon_id: str | int, feature_class: str) -> SynonymIndex:
        """Return the partition's index, allocating an empty one if absent."""
        key = PartitionKey.of(taxon_id, feature_class)
        partition = self._partitions.get(key)
        if partition is None:
            partition = _Partition(SynonymIndex())
            self._partitions[key] = partition
            logger.debug("Created partition %s", key)
        return partition.index

    def mark_complete(self, taxon_id: str | int, feature_class: str) -> None:
        """
        Flip a partition to COMPLETE and freeze its index.

        Raises:
            UnknownPartitionError: the partition was never created
        """
        partition = self._get(taxon_id, feature_class)
        if partition.state is PartitionState.COMPLETE:
            return
        partition.index.freeze()
        partition.state = PartitionState.COMPLETE
        logger.debug(
            "Partition %s complete (%d canonical ids)",
            PartitionKey.of(taxon_id, feature_class),
            partition.index.count_canonical_ids(),
        )

    def discard_partition(self, taxon_id: str | int, feature_class: str) -> bool:
        """
        Drop a partition that never reached COMPLETE.

        Returns:
            True if a partition was removed

        Raises:
            PartitionCompleteError: the partition is complete
        """
        key = PartitionKey.of(taxon_id, feature_class)
        partition = self._partitions.get(key)
        if partition is None:
            return False
        if partition.state is PartitionState.COMPLETE:
            raise PartitionCompleteError(f"Partition {key} is complete and cannot be discarded")
        del self._partitions[key]
        logger.debug("Discarded partially populated partition %s", key)
        return True

    def absorb(self, other: IdResolver) -> list[PartitionKey]:
        """
        Take over the complete partitions of another resolver that this one lacks.

        Complete partitions already held here are kept; partitions still
        populating are replaced by the other resolver's complete copy.

        Returns:
            Keys of the partitions taken over
        """
        taken = []
        for key, partition in other._partitions.items():
            if partition.state is not PartitionState.COMPLETE:
                continue
            current = self._partitions.get(key)
            if current is not None and current.state is PartitionState.COMPLETE:
                continue
            self._partitions[key] = partition
            taken.append(key)
        return sorted(taken)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_main_ids(
        self,
        taxon_id: str | int,
        feature_class: str,
        canonical_id: str,
        ids: Iterable[str] = (),
    ) -> None:
        """
        Register a canonical id, plus any further main ids that map to it.

        Raises:
            ConflictError: an id is bound to another canonical id
            PartitionCompleteError: the partition is already complete
        """
        index = self.get_or_create_partition(taxon_id, feature_class)
        index.add_main_identifier(canonical_id)
        extra = [i for i in ids if i != canonical_id]
        if extra:
            index.add_synonyms(canonical_id, extra)

    def add_synonyms(
        self,
        taxon_id: str | int,
        feature_class: str,
        canonical_id: str,
        synonyms: Iterable[str],
    ) -> None:
        """
        Union synonyms into canonical_id's entry.

        Raises:
            ConflictError: a synonym is bound to another canonical id
            PartitionCompleteError: the partition is already complete
        """
        self.get_or_create_partition(taxon_id, feature_class).add_synonyms(canonical_id, synonyms)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, taxon_id: str | int, feature_class: str, identifier: str) -> set[str]:
        """
        Resolve an id or synonym to its canonical id(s).

        Returns:
            Matching canonical ids; empty if the identifier is unknown

        Raises:
            UnknownPartitionError: the partition was never created
        """
        return self._get(taxon_id, feature_class).index.resolve(identifier)

    def resolve_one(self, taxon_id: str | int, feature_class: str, identifier: str) -> str | None:
        """
        Resolve to a single canonical id.

        Returns:
            The canonical id, or None if the identifier is unknown

        Raises:
            AmbiguousIdentifierError: more than one canonical id matches
            UnknownPartitionError: the partition was never created
        """
        matches = self.resolve(taxon_id, feature_class, identifier)
        if len(matches) > 1:
            raise AmbiguousIdentifierError(identifier, matches)
        return next(iter(matches), None)

    def count_resolutions(self, taxon_id: str | int, feature_class: str, identifier: str) -> int:
        return len(self.resolve(taxon_id, feature_class, identifier))

    def is_primary_identifier(self, taxon_id: str | int, feature_class: str, identifier: str) -> bool:
        return self._get(taxon_id, feature_class).index.is_canonical(identifier)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_taxon(self, taxon_id: str | int) -> bool:
        """True if any complete partition exists for the taxon."""
        taxon = str(taxon_id).strip()
        return any(
            k.taxon_id == taxon and p.state is PartitionState.COMPLETE
            for k, p in self._partitions.items()
        )

    def taxon_ids(self) -> set[str]:
        return {k.taxon_id for k in self._partitions}

    def feature_classes(self, taxon_id: str | int | None = None) -> set[str]:
        taxon = None if taxon_id is None else str(taxon_id).strip()
        return {k.feature_class for k in self._partitions if taxon is None or k.taxon_id == taxon}

    def partitions(self, complete_only: bool = False) -> Iterator[tuple[PartitionKey, SynonymIndex]]:
        """Yield (key, index) pairs in key order."""
        for key in sorted(self._partitions):
            partition = self._partitions[key]
            if complete_only and partition.state is not PartitionState.COMPLETE:
                continue
            yield key, partition.index

    def stats(self) -> dict[str, dict[str, int | str]]:
        """Per-partition state and counts, keyed by "taxon/class"."""
        return {
            str(key): {
                "state": partition.state.value,
                "canonical_ids": partition.index.count_canonical_ids(),
                "synonyms": partition.index.count_synonyms(),
            }
            for key, partition in sorted(self._partitions.items())
        }

    def __len__(self) -> int:
        return len(self._partitions)

    def __repr__(self) -> str:
        complete = sum(1 for p in self._partitions.values() if p.state is PartitionState.COMPLETE)
        return f"IdResolver(partitions={len(self._partitions)}, complete={complete})"

    def _get(self, taxon_id: str | int, feature_class: str) -> _Partition:
        key = PartitionKey.of(taxon_id, feature_class)
        partition = self._partitions.get(key)
        if partition is None:
            raise UnknownPartitionError(key.taxon_id, key.feature_class)
        return partition
