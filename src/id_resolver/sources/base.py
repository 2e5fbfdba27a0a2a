"""
Base classes for resolver source adapters.

Each external database gets one adapter that reads its mapping file format and
populates resolver partitions. Adapters never mark partitions complete; the
caller does that once populate() returns.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TextIO

from id_resolver.resolve.resolver import IdResolver

logger = logging.getLogger(__name__)


class SourceAdapter(ABC):
    """Populate resolver partitions from one raw source file format."""

    source_key: str
    file_suffix: str
    taxon_id: str
    default_feature_classes: tuple[str, ...] = ("gene",)

    @abstractmethod
    def populate(
        self,
        reader: TextIO,
        resolver: IdResolver,
        taxon_id: str,
        feature_classes: Iterable[str],
    ) -> int:
        """
        Read records from reader and add them to the target partitions.

        Args:
            reader: Open text stream in the source's format
            resolver: Resolver to populate
            taxon_id: Target taxon id
            feature_classes: Target feature classes; every record goes to each

        Returns:
            Number of records accepted
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source_key={self.source_key!r})"


class TabDelimitedSynonymAdapter(SourceAdapter):
    """
    Adapter for two-column synonym files.

    Format: <canonical id> \\t <synonym>|<synonym>|...

    Comment lines (#), lines with fewer than two columns and lines whose first
    column lacks id_prefix are skipped.
    """

    id_prefix: str

    def populate(
        self,
        reader: TextIO,
        resolver: IdResolver,
        taxon_id: str,
        feature_classes: Iterable[str],
    ) -> int:
        classes = list(feature_classes)
        accepted = 0
        skipped = 0

        for line in reader:
            record = self.parse_line(line)
            if record is None:
                if line.strip():
                    skipped += 1
                continue

            canonical_id, synonyms = record
            for feature_class in classes:
                resolver.add_main_ids(taxon_id, feature_class, canonical_id)
                resolver.add_synonyms(taxon_id, feature_class, canonical_id, synonyms)
            accepted += 1

        logger.debug(
            "%s: accepted %d records, skipped %d lines", self.source_key, accepted, skipped
        )
        return accepted

    def parse_line(self, line: str) -> tuple[str, list[str]] | None:
        """
        Split one line into (canonical id, synonyms).

        Returns:
            The parsed record, or None if the line should be skipped
        """
        line = line.rstrip("\r\n")
        if not line or line.startswith("#"):
            return None
        columns = line.split("\t")
        if len(columns) < 2:
            return None
        canonical_id = columns[0].strip()
        if not canonical_id.startswith(self.id_prefix):
            return None
        synonyms = [s.strip() for s in columns[1].split("|") if s.strip()]
        return canonical_id, synonyms
