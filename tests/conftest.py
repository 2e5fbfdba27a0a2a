"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from id_resolver.config import Settings
from id_resolver.resolve import IdResolver

ZFIN_TAXON = "7955"

ZFIN_LINES = [
    "# ZFIN gene identifiers",
    "ZDB-GENE-010\tabc1|abc2",
    "ZDB-GENE-011\tppardb|pparb|zgc:110792",
    "BAD-ID\tx",
    "ZDB-GENE-012",
]


@pytest.fixture
def zfin_root(tmp_path: Path) -> Path:
    """Directory holding a small ZFIN source file named 'zfin'."""
    root = tmp_path / "data"
    root.mkdir()
    (root / "zfin").write_text("\n".join(ZFIN_LINES) + "\n", encoding="utf-8")
    return root


@pytest.fixture
def settings_for(tmp_path: Path):
    """Build Settings pointing at a root path, with the cache under tmp_path."""

    def _make(root: str | Path | None = None) -> Settings:
        rootpath = "" if root is None else f"{root}/"
        return Settings(
            resolver_file_rootpath=rootpath,
            cache_file=tmp_path / "build" / "idresolver.cache",
            _env_file=None,
        )

    return _make


@pytest.fixture
def populated_resolver() -> IdResolver:
    """Resolver with one complete gene partition and one still populating."""
    resolver = IdResolver()
    resolver.add_main_ids(ZFIN_TAXON, "gene", "ZDB-GENE-010")
    resolver.add_synonyms(ZFIN_TAXON, "gene", "ZDB-GENE-010", {"abc1", "abc2"})
    resolver.add_main_ids(ZFIN_TAXON, "gene", "ZDB-GENE-011")
    resolver.add_synonyms(ZFIN_TAXON, "gene", "ZDB-GENE-011", {"pparb"})
    resolver.mark_complete(ZFIN_TAXON, "gene")
    resolver.add_synonyms(10090, "gene", "MGI:97490", {"Pax6"})
    return resolver
