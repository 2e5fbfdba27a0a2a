"""Tests for the per-partition synonym index."""

import pytest

from id_resolver.errors import ConflictError, PartitionCompleteError
from id_resolver.resolve import SynonymIndex


class TestSynonymIndex:
    """Tests for SynonymIndex."""

    def test_every_synonym_resolves_to_canonical(self):
        """Test that each synonym and the canonical id itself resolve."""
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-010", {"abc1", "abc2"})

        for identifier in ("abc1", "abc2", "ZDB-GENE-010"):
            assert index.resolve(identifier) == {"ZDB-GENE-010"}
        assert index.synonyms_of("ZDB-GENE-010") == {"ZDB-GENE-010", "abc1", "abc2"}

    def test_unknown_identifier(self):
        """Test that unknown identifiers resolve to an empty set."""
        index = SynonymIndex()
        index.add_main_identifier("ZDB-GENE-010")
        assert index.resolve("nope") == set()
        assert "nope" not in index

    def test_lookup_is_case_sensitive(self):
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-010", ["Abc1"])
        assert index.resolve("abc1") == set()
        assert index.resolve("Abc1") == {"ZDB-GENE-010"}

    def test_add_main_identifier_idempotent(self):
        index = SynonymIndex()
        index.add_main_identifier("ZDB-GENE-010")
        index.add_main_identifier("ZDB-GENE-010")
        assert index.count_canonical_ids() == 1
        assert index.count_synonyms() == 1
        assert index.is_canonical("ZDB-GENE-010")

    def test_add_synonyms_idempotent(self):
        """Test that adding the same pair twice changes nothing."""
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-010", {"abc1", "abc2"})
        before = (index.count_canonical_ids(), index.count_synonyms(), list(index.items()))

        index.add_synonyms("ZDB-GENE-010", {"abc1", "abc2"})
        after = (index.count_canonical_ids(), index.count_synonyms(), list(index.items()))
        assert before == after

    def test_add_synonyms_unions(self):
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-010", ["abc1"])
        index.add_synonyms("ZDB-GENE-010", ["abc2"])
        assert index.synonyms_of("ZDB-GENE-010") == {"ZDB-GENE-010", "abc1", "abc2"}

    def test_blank_synonyms_ignored(self):
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-010", ["", "  ", "abc1"])
        assert index.count_synonyms() == 2

    def test_blank_canonical_rejected(self):
        with pytest.raises(ValueError):
            SynonymIndex().add_main_identifier("  ")

    def test_conflicting_synonym(self):
        """Test that a synonym cannot be bound to two canonical ids."""
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-001", ["synA", "synB"])

        with pytest.raises(ConflictError) as exc_info:
            index.add_synonyms("ZDB-GENE-002", ["synC", "synA"])

        err = exc_info.value
        assert err.synonym == "synA"
        assert err.existing == "ZDB-GENE-001"
        assert err.incoming == "ZDB-GENE-002"

    def test_conflict_applies_nothing(self):
        """Test that a rejected call leaves the index unchanged."""
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-001", ["synA"])

        with pytest.raises(ConflictError):
            index.add_synonyms("ZDB-GENE-002", ["synC", "synA"])

        assert index.resolve("synC") == set()
        assert index.resolve("ZDB-GENE-002") == set()
        assert index.count_canonical_ids() == 1

    def test_canonical_already_bound_as_synonym(self):
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-001", ["ZDB-GENE-002"])
        with pytest.raises(ConflictError):
            index.add_main_identifier("ZDB-GENE-002")

    def test_frozen_index_rejects_writes(self):
        index = SynonymIndex()
        index.add_main_identifier("ZDB-GENE-010")
        index.freeze()

        assert index.frozen
        with pytest.raises(PartitionCompleteError):
            index.add_main_identifier("ZDB-GENE-011")
        with pytest.raises(PartitionCompleteError):
            index.add_synonyms("ZDB-GENE-010", ["abc1"])
        assert index.resolve("ZDB-GENE-010") == {"ZDB-GENE-010"}

    def test_items_sorted(self):
        index = SynonymIndex()
        index.add_synonyms("ZDB-GENE-2", ["b", "a"])
        index.add_synonyms("ZDB-GENE-1", ["c"])
        assert list(index.items()) == [
            ("ZDB-GENE-1", ["ZDB-GENE-1", "c"]),
            ("ZDB-GENE-2", ["ZDB-GENE-2", "a", "b"]),
        ]
