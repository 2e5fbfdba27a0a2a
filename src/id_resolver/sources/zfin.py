"""
ZFIN gene identifier source.

Reads the ZFIN identifier mapping file for zebrafish genes:

    ZDB-GENE-000112-47	ppardb|pparb|zgc:110792
"""

from id_resolver.sources.base import TabDelimitedSynonymAdapter


class ZfinAdapter(TabDelimitedSynonymAdapter):
    """Populate zebrafish gene partitions from ZFIN ids."""

    source_key = "zfin"
    file_suffix = "zfin"
    taxon_id = "7955"
    id_prefix = "ZDB-GENE"
    default_feature_classes = ("gene",)
