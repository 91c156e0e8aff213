"""Single-slot cache of flattened symbols keyed by document revision."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass

from .range_index import RangeIndex
from .symbol_types import Entry, VersionKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheRecord:
    """Flattened entries and their range index for one document revision."""

    version_key: VersionKey
    entries: tuple[Entry, ...]
    range_index: RangeIndex


class NavigationCache:
    """Holds at most one ``CacheRecord``.

    Storing a record for another document or revision replaces the previous
    one wholesale; records are never mutated after construction.
    """

    def __init__(self) -> None:
        self._record: CacheRecord | None = None

    @property
    def record(self) -> CacheRecord | None:
        return self._record

    def get(self, document_id: Hashable, version_key: VersionKey) -> CacheRecord | None:
        """Return the live record when it was stored for exactly ``version_key``."""
        record = self._record
        if record is None or record.version_key.document_id != document_id:
            logger.debug("symbol cache miss for %r", document_id)
            return None
        if record.version_key != version_key:
            logger.debug(
                "symbol cache stale for %r (%d != %d)",
                document_id,
                record.version_key.change_counter,
                version_key.change_counter,
            )
            return None
        logger.debug("symbol cache hit for %r", document_id)
        return record

    def put(self, document_id: Hashable, version_key: VersionKey, entries: Sequence[Entry]) -> CacheRecord:
        """Build a complete record for ``entries`` and swap it into the slot."""
        if version_key.document_id != document_id:
            raise ValueError("version key does not belong to document")
        frozen = tuple(entries)
        record = CacheRecord(version_key=version_key, entries=frozen, range_index=RangeIndex(frozen))
        self._record = record
        return record

    def clear(self) -> None:
        """Drop the cached record."""
        self._record = None
