"""
id_resolver: identifier resolution for biological data loading.

Translates organism-specific gene identifiers and their synonyms into a single
canonical identifier per (taxon, feature class) partition:

    raw mapping file → SourceAdapter → IdResolver → cache file

Core constraints:
- One resolver per loading run, passed explicitly to collaborators
- A partition is either absent or complete from a caller's point of view
- Synonym conflicts are errors, never silently merged
"""

__version__ = "0.1.0"
