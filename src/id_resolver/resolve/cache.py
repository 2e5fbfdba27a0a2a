"""
Resolver cache file.

Persists every complete partition to one flat, line-oriented text file so a
later run can skip parsing the raw source files. Format (tab-separated):

    #id-resolver-cache  1
    P  <taxon>  <class>                          partition start
    I  <taxon>  <class>  <canonical>  <syn>|<syn>  one line per canonical id
    C  <taxon>  <class>  <count>                 partition complete, count = I lines

Partitions and records are sorted, so the same resolver always produces the
same bytes. Fields are backslash-escaped so any string round-trips.
"""

import logging
import os
import tempfile
from pathlib import Path

from id_resolver.errors import CacheCorruptError, ConflictError
from id_resolver.resolve.resolver import IdResolver, PartitionKey, PartitionState

logger = logging.getLogger(__name__)

MAGIC = "#id-resolver-cache"
FORMAT_VERSION = "1"

PARTITION = "P"
RECORD = "I"
COMPLETE = "C"

_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "|": "\\|"}
_UNESCAPES = {"\\": "\\", "t": "\t", "n": "\n", "r": "\r", "|": "|"}


def save_cache(resolver: IdResolver, path: Path) -> int:
    """
    Write every complete partition of the resolver to path.

    The file is written next to its destination and moved into place, so a
    reader sees either the old cache or the new one, never a partial file.

    Args:
        resolver: Resolver to persist
        path: Destination cache file

    Returns:
        Number of partitions written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    written = 0
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(f"{MAGIC}\t{FORMAT_VERSION}\n")
            for key, index in resolver.partitions(complete_only=True):
                taxon, cls = _escape(key.taxon_id), _escape(key.feature_class)
                f.write(f"{PARTITION}\t{taxon}\t{cls}\n")
                count = 0
                for canonical_id, synonyms in index.items():
                    joined = "|".join(_escape(s) for s in synonyms)
                    f.write(f"{RECORD}\t{taxon}\t{cls}\t{_escape(canonical_id)}\t{joined}\n")
                    count += 1
                f.write(f"{COMPLETE}\t{taxon}\t{cls}\t{count}\n")
                written += 1
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Saved %d partitions to %s", written, path)
    return written


def restore_cache(path: Path) -> IdResolver:
    """
    Rebuild a resolver from a cache file written by save_cache().

    Every partition block that ends with its completion marker is marked
    complete.

    Raises:
        CacheCorruptError: the file is unreadable or malformed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8", newline="") as f:
            lines = f.read().split("\n")
    except (OSError, UnicodeDecodeError) as e:
        raise CacheCorruptError(path, f"cannot read file ({e})") from e

    if lines and lines[-1] == "":
        lines.pop()
    if not lines:
        raise CacheCorruptError(path, "empty file")
    if lines[0] != f"{MAGIC}\t{FORMAT_VERSION}":
        raise CacheCorruptError(path, "unrecognized header", 1)

    resolver = IdResolver()
    current: PartitionKey | None = None
    count = 0

    for line_no, line in enumerate(lines[1:], start=2):
        fields = line.split("\t")
        kind = fields[0]

        if kind == PARTITION:
            _expect_fields(path, line_no, fields, 3)
            if current is not None:
                raise CacheCorruptError(path, f"partition {current} has no completion marker", line_no)
            current = PartitionKey.of(_unescape(path, line_no, fields[1]), _unescape(path, line_no, fields[2]))
            if resolver.state(current.taxon_id, current.feature_class) is not PartitionState.ABSENT:
                raise CacheCorruptError(path, f"duplicate partition {current}", line_no)
            resolver.get_or_create_partition(current.taxon_id, current.feature_class)
            count = 0

        elif kind == RECORD:
            _expect_fields(path, line_no, fields, 5)
            _expect_current(path, line_no, fields, current)
            canonical_id = _unescape(path, line_no, fields[3])
            synonyms = [_unescape(path, line_no, s) for s in _split_synonyms(fields[4])]
            try:
                resolver.add_main_ids(current.taxon_id, current.feature_class, canonical_id)
                resolver.add_synonyms(current.taxon_id, current.feature_class, canonical_id, synonyms)
            except (ConflictError, ValueError) as e:
                raise CacheCorruptError(path, str(e), line_no) from e
            count += 1

        elif kind == COMPLETE:
            _expect_fields(path, line_no, fields, 4)
            _expect_current(path, line_no, fields, current)
            if fields[3] != str(count):
                raise CacheCorruptError(
                    path, f"partition {current} declares {fields[3]} records, found {count}", line_no
                )
            resolver.mark_complete(current.taxon_id, current.feature_class)
            current = None

        else:
            raise CacheCorruptError(path, f"unknown record type {kind!r}", line_no)

    if current is not None:
        raise CacheCorruptError(path, f"partition {current} is truncated")

    logger.debug("Restored %d partitions from %s", len(resolver), path)
    return resolver


def _escape(value: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def _unescape(path: Path, line_no: int, value: str) -> str:
    if "\\" not in value:
        return value
    out = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt not in _UNESCAPES:
            raise CacheCorruptError(path, f"bad escape sequence in {value!r}", line_no)
        out.append(_UNESCAPES[nxt])
    return "".join(out)


def _split_synonyms(field: str) -> list[str]:
    """Split on "|" separators that are not escaped."""
    parts = []
    buf = []
    escaped = False
    for ch in field:
        if escaped:
            buf.append(ch)
            escaped = False
        elif ch == "\\":
            buf.append(ch)
            escaped = True
        elif ch == "|":
            parts.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    parts.append("".join(buf))
    return [p for p in parts if p]


def _expect_fields(path: Path, line_no: int, fields: list[str], n: int) -> None:
    if len(fields) != n:
        raise CacheCorruptError(path, f"expected {n} fields, found {len(fields)}", line_no)


def _expect_current(path: Path, line_no: int, fields: list[str], current: PartitionKey | None) -> None:
    if current is None:
        raise CacheCorruptError(path, "record outside a partition block", line_no)
    key = PartitionKey.of(_unescape(path, line_no, fields[1]), _unescape(path, line_no, fields[2]))
    if key != current:
        raise CacheCorruptError(path, f"record for {key} inside partition {current}", line_no)
