"""Single-slot cache holding the most recently fetched result set."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .models import PlaceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheSnapshot:
    records: tuple[PlaceRecord, ...] = ()
    last_query: str = ""
    last_fetch_limit: int = 0


class ResultCache:
    """Keeps exactly one query's results; every write replaces the whole slot.

    Readers only ever see a complete ``CacheSnapshot``, so the records always
    belong to the ``(last_query, last_fetch_limit)`` stored next to them.
    """

    def __init__(self) -> None:
        self._snapshot = CacheSnapshot()

    def replace(self, records: Iterable[PlaceRecord], query: str, fetch_limit: int) -> None:
        self._snapshot = CacheSnapshot(tuple(records), query, fetch_limit)
        logger.debug(
            "Cache replaced query=%r limit=%s records=%s",
            query,
            fetch_limit,
            len(self._snapshot.records),
        )

    def current(self) -> CacheSnapshot:
        return self._snapshot

    def clear(self) -> None:
        self._snapshot = CacheSnapshot()

    def __len__(self) -> int:
        return len(self._snapshot.records)
