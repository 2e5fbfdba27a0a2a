"""
Resolver factory.

Makes sure the partitions a loader needs are present in the resolver, doing
the least work possible:

1. Already complete in memory → nothing to do
2. Complete in the cache file → restore them
3. Otherwise locate the raw source file from configuration, populate the
   partitions with the source's adapter and rewrite the cache

A missing root path or source file is not an error: the partitions stay
absent and the returned outcome says why.

Usage:
    configure_logging()
    resolver = IdResolver()
    factory = ResolverFactory(resolver)
    result = factory.ensure("zfin")
    if result.ok:
        resolver.resolve("7955", "gene", "abc1")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.table import Table

from id_resolver.config import Settings, settings as default_settings
from id_resolver.errors import CacheCorruptError, PartitionBusyError
from id_resolver.resolve.cache import restore_cache, save_cache
from id_resolver.resolve.resolver import IdResolver, PartitionKey, PartitionState
from id_resolver.sources import SourceAdapter, get_source

logger = logging.getLogger(__name__)
console = Console()


class Outcome(Enum):
    """Result of ensuring a source's partitions."""

    RESOLVED = "resolved"
    CACHED = "cached"
    NOT_CONFIGURED = "not_configured"
    SOURCE_MISSING = "source_missing"


@dataclass
class PopulateResult:
    """What ensure() did for one source."""

    outcome: Outcome
    source: str
    partitions: list[PartitionKey] = field(default_factory=list)
    records: int | None = None
    path: Path | None = None

    @property
    def ok(self) -> bool:
        """True if the partitions are available in the resolver."""
        return self.outcome in (Outcome.RESOLVED, Outcome.CACHED)


class ResolverFactory:
    """Populate an explicitly passed resolver from cache or raw source files."""

    def __init__(
        self,
        resolver: IdResolver,
        config: Settings | None = None,
        cache_file: Path | None = None,
    ):
        self.resolver = resolver
        self.config = config or default_settings
        self.cache_file = Path(cache_file) if cache_file else self.config.cache_file

    def ensure(
        self,
        source: str | SourceAdapter,
        feature_classes: Iterable[str] | None = None,
        taxon_id: str | int | None = None,
    ) -> PopulateResult:
        """
        Make the source's partitions available in the resolver.

        Args:
            source: Registered source name or adapter instance
            feature_classes: Feature classes to populate (default: the adapter's)
            taxon_id: Taxon to populate (default: the adapter's)

        Returns:
            PopulateResult describing where the data came from, or why it is absent

        Raises:
            ConflictError: the source file binds a synonym to two canonical ids
            PartitionBusyError: a target partition was left populating by another caller
        """
        adapter = get_source(source) if isinstance(source, str) else source
        taxon = str(taxon_id if taxon_id is not None else adapter.taxon_id)
        classes = sorted(set(feature_classes or adapter.default_feature_classes))
        keys = [PartitionKey.of(taxon, c) for c in classes]

        if self.resolver.has_partitions(taxon, classes):
            return PopulateResult(Outcome.RESOLVED, adapter.source_key, keys)

        if self._restore_from_cache() and self.resolver.has_partitions(taxon, classes):
            logger.info("Restored %s partitions from cache %s", adapter.source_key, self.cache_file)
            return PopulateResult(Outcome.CACHED, adapter.source_key, keys, path=self.cache_file)

        path = self.config.source_path(adapter.file_suffix)
        if path is None:
            logger.warning("Resolver data file root path is not specified")
            return PopulateResult(Outcome.NOT_CONFIGURED, adapter.source_key, keys)
        if not path.is_file():
            logger.warning("Resolver file does not exist: %s", path)
            return PopulateResult(Outcome.SOURCE_MISSING, adapter.source_key, keys, path=path)

        logger.info("Creating id resolver from data file %s and caching it", path)
        try:
            records = self._populate(adapter, path, taxon, classes)
        except OSError as e:
            logger.warning("Cannot read resolver file %s: %s", path, e)
            return PopulateResult(Outcome.SOURCE_MISSING, adapter.source_key, keys, path=path)

        try:
            save_cache(self.resolver, self.cache_file)
        except OSError as e:
            logger.error("Failed to save resolver cache to %s: %s", self.cache_file, e)

        self._print_summary(adapter, keys, records, path)
        return PopulateResult(Outcome.RESOLVED, adapter.source_key, keys, records, path)

    def _restore_from_cache(self) -> bool:
        """Absorb complete partitions from the cache file, if it is usable."""
        if not self.cache_file.is_file():
            return False
        try:
            cached = restore_cache(self.cache_file)
        except CacheCorruptError as e:
            logger.warning("Ignoring resolver cache: %s", e)
            return False
        taken = self.resolver.absorb(cached)
        if taken:
            logger.debug("Took %d partitions from cache", len(taken))
        return True

    def _populate(self, adapter: SourceAdapter, path: Path, taxon: str, classes: list[str]) -> int:
        """
        Run the adapter over path; drop half-built partitions if it fails.

        Raises:
            PartitionBusyError: a target partition is already being populated
        """
        pending = [c for c in classes if not self.resolver.has_partition(taxon, c)]
        for feature_class in pending:
            if self.resolver.state(taxon, feature_class) is PartitionState.POPULATING:
                raise PartitionBusyError(taxon, feature_class)
        for feature_class in pending:
            self.resolver.get_or_create_partition(taxon, feature_class)

        try:
            # Undecodable bytes are replaced so a bad byte only spoils its own line
            with open(path, encoding="utf-8", errors="replace") as reader:
                records = adapter.populate(reader, self.resolver, taxon, pending)
        except Exception:
            for feature_class in pending:
                if self.resolver.state(taxon, feature_class) is not PartitionState.COMPLETE:
                    self.resolver.discard_partition(taxon, feature_class)
            raise

        for feature_class in pending:
            self.resolver.mark_complete(taxon, feature_class)
        return records

    def _print_summary(
        self, adapter: SourceAdapter, keys: list[PartitionKey], records: int, path: Path
    ) -> None:
        table = Table(title=f"{adapter.source_key} Resolver Summary", show_header=True)
        table.add_column("Partition", style="cyan")
        table.add_column("Canonical IDs", justify="right")
        table.add_column("Synonyms", justify="right")
        stats = self.resolver.stats()
        for key in keys:
            row = stats[str(key)]
            table.add_row(str(key), f"{row['canonical_ids']:,}", f"{row['synonyms']:,}")
        table.add_row("Records read", f"{records:,}", "", style="dim")
        table.add_row("Source", path.name, "", style="dim")
        console.print(table)
