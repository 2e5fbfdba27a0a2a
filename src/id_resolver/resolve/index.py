"""
Synonym index for one (taxon, feature class) partition.

Keeps both directions of the canonical id ↔ synonym relation so that lookups
by any synonym are a single dict access.
"""

from collections.abc import Iterable, Iterator

from id_resolver.errors import ConflictError, PartitionCompleteError


class SynonymIndex:
    """Bidirectional canonical id ↔ synonym mapping for one partition."""

    def __init__(self):
        self._synonyms: dict[str, set[str]] = {}
        self._canonical_of: dict[str, str] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """True once the owning partition has been marked complete."""
        return self._frozen

    def freeze(self) -> None:
        """Reject any further mutation."""
        self._frozen = True

    def add_main_identifier(self, canonical_id: str) -> None:
        """
        Register a canonical id. Idempotent.

        Raises:
            ConflictError: canonical_id is already a synonym of another canonical id
        """
        self._check_writable()
        canonical_id = _clean_canonical(canonical_id)
        self._check_binding(canonical_id, canonical_id)
        self._bind(canonical_id, [canonical_id])

    def add_synonyms(self, canonical_id: str, synonyms: Iterable[str]) -> None:
        """
        Union synonyms into the entry for canonical_id, creating it if missing.

        Either every synonym is bound or, on conflict, none are.

        Raises:
            ConflictError: a synonym is bound to a different canonical id
        """
        self._check_writable()
        canonical_id = _clean_canonical(canonical_id)
        incoming = [canonical_id]
        incoming.extend(s for s in synonyms if s and s.strip())
        for synonym in incoming:
            self._check_binding(synonym, canonical_id)
        self._bind(canonical_id, incoming)

    def resolve(self, identifier: str) -> set[str]:
        """Return the canonical ids matching identifier exactly (empty if unknown)."""
        canonical_id = self._canonical_of.get(identifier)
        return {canonical_id} if canonical_id is not None else set()

    def is_canonical(self, identifier: str) -> bool:
        return identifier in self._synonyms

    def synonyms_of(self, canonical_id: str) -> frozenset[str]:
        return frozenset(self._synonyms.get(canonical_id, ()))

    def count_canonical_ids(self) -> int:
        return len(self._synonyms)

    def count_synonyms(self) -> int:
        """Number of distinct strings that resolve, canonical ids included."""
        return len(self._canonical_of)

    def items(self) -> Iterator[tuple[str, list[str]]]:
        """Yield (canonical id, sorted synonyms) in canonical id order."""
        for canonical_id in sorted(self._synonyms):
            yield canonical_id, sorted(self._synonyms[canonical_id])

    def __len__(self) -> int:
        return len(self._synonyms)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._canonical_of

    def __repr__(self) -> str:
        return (
            f"SynonymIndex(canonical_ids={self.count_canonical_ids()}, "
            f"synonyms={self.count_synonyms()}, frozen={self._frozen})"
        )

    def _check_writable(self) -> None:
        if self._frozen:
            raise PartitionCompleteError("Partition is complete and can no longer be modified")

    def _check_binding(self, synonym: str, canonical_id: str) -> None:
        existing = self._canonical_of.get(synonym)
        if existing is not None and existing != canonical_id:
            raise ConflictError(synonym, existing, canonical_id)

    def _bind(self, canonical_id: str, synonyms: list[str]) -> None:
        entry = self._synonyms.setdefault(canonical_id, {canonical_id})
        self._canonical_of[canonical_id] = canonical_id
        for synonym in synonyms:
            entry.add(synonym)
            self._canonical_of[synonym] = canonical_id


def _clean_canonical(canonical_id: str) -> str:
    if not canonical_id or not canonical_id.strip():
        raise ValueError("Canonical id must not be blank")
    return canonical_id
