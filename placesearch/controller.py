"""Search-state controller: debounce, single-flight fetching and pagination.

All methods must be called from the event loop that runs the controller. The
controller is the only writer of the query, the fetch limit, the page size,
the page offset and the result cache; everything else reads snapshots.

Lifecycle of one search::

    trigger (keystroke / fetch-limit change)
        -> DEBOUNCING   timer restarted, in-flight responses become stale
        -> IN_FLIGHT    timer elapsed, query long enough, request issued
        -> SETTLED | FAILED

A query shorter than ``min_query_length`` goes from DEBOUNCING straight to
IDLE with an empty cache.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Callable

from .cache import CacheSnapshot, ResultCache
from .config import Settings
from .errors import FetchError
from .fetcher import Fetcher, FetchResult
from .models import RequestState, SearchSnapshot
from .pagination import build_page_view, clamp_start, go_to_page

logger = logging.getLogger(__name__)

MIN_FETCH_LIMIT = 1
MAX_FETCH_LIMIT = 10

MESSAGE_START = "Start searching"
MESSAGE_NO_RESULTS = "No result found"
FETCH_FAILED_MESSAGE = "Failed to fetch data"

Listener = Callable[[SearchSnapshot], None]


@dataclass
class SearchState:
    query: str = ""
    fetch_limit: int = 5
    page_size: int = 3
    # Offset of the first visible record; always a multiple of page_size.
    start: int = 0


class QueryController:
    def __init__(
        self,
        fetcher: Fetcher,
        *,
        debounce_seconds: float = 0.8,
        min_query_length: int = 3,
        fetch_limit: int = 5,
        page_size: int = 3,
        cache: ResultCache | None = None,
    ) -> None:
        if not MIN_FETCH_LIMIT <= fetch_limit <= MAX_FETCH_LIMIT:
            raise ValueError(f"fetch_limit must be in [{MIN_FETCH_LIMIT}, {MAX_FETCH_LIMIT}], got {fetch_limit}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._fetcher = fetcher
        self._debounce_seconds = debounce_seconds
        self._min_query_length = min_query_length
        self._cache = cache if cache is not None else ResultCache()
        self._state = SearchState(fetch_limit=fetch_limit, page_size=page_size)
        self._request_state = RequestState.IDLE
        self._error: str | None = None
        self._debounce_task: asyncio.Task | None = None
        # (query, fetch_limit) -> (sequence number, task) for requests still awaiting a response.
        self._inflight: dict[tuple[str, int], tuple[int, asyncio.Task]] = {}
        self._sequence = 0
        self._current_request: int | None = None
        self._listeners: list[Listener] = []

    @classmethod
    def from_settings(cls, fetcher: Fetcher, settings: Settings) -> "QueryController":
        return cls(
            fetcher,
            debounce_seconds=settings.debounce_seconds,
            min_query_length=settings.min_query_length,
            fetch_limit=settings.default_fetch_limit,
            page_size=settings.default_page_size,
        )

    # ------------------------------------------------------------------ reads

    @property
    def state(self) -> SearchState:
        return replace(self._state)

    @property
    def request_state(self) -> RequestState:
        return self._request_state

    @property
    def results(self) -> CacheSnapshot:
        return self._cache.current()

    @property
    def requests_issued(self) -> int:
        return self._sequence

    def snapshot(self) -> SearchSnapshot:
        records = self._cache.current().records
        return SearchSnapshot(
            query=self._state.query,
            fetch_limit=self._state.fetch_limit,
            page_size=self._state.page_size,
            request_state=self._request_state,
            loading=self._request_state is RequestState.IN_FLIGHT,
            error=self._error,
            message=self._message(bool(records)),
            page_view=build_page_view(records, self._state.start, self._state.page_size),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot after every visible change."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ----------------------------------------------------------------- writes

    def on_query_change(self, text: str) -> None:
        if text == self._state.query:
            return
        self._state.query = text
        self._trigger()

    def on_fetch_limit_change(self, value: int) -> bool:
        """Returns False when the value is rejected or unchanged."""
        if not MIN_FETCH_LIMIT <= value <= MAX_FETCH_LIMIT:
            logger.info("Ignoring fetch limit %s outside [%s, %s]", value, MIN_FETCH_LIMIT, MAX_FETCH_LIMIT)
            return False
        if value == self._state.fetch_limit:
            return False
        self._state.fetch_limit = value
        self._trigger()
        return True

    def on_page_size_change(self, value: int) -> None:
        page_size = max(1, value)
        if page_size == self._state.page_size:
            return
        self._state.page_size = page_size
        self._state.start = clamp_start(self._state.start, len(self._cache), page_size)
        self._notify()

    def on_page_request(self, page_number: int) -> None:
        page_size = self._state.page_size
        self._state.start = clamp_start(go_to_page(page_number, page_size), len(self._cache), page_size)
        self._notify()

    def next_page(self) -> None:
        self.on_page_request(self._state.start // self._state.page_size + 2)

    def previous_page(self) -> None:
        self.on_page_request(self._state.start // self._state.page_size)

    async def submit(self) -> SearchSnapshot:
        """Search right away instead of waiting out the debounce window."""

        self._cancel_timer()
        self._error = None
        task = self._settle()
        if task is not None:
            await asyncio.shield(task)
        return self.snapshot()

    async def join(self) -> None:
        """Wait until no debounce timer is pending and no request is in flight."""

        while True:
            pending = [task for _, task in self._inflight.values()]
            if self._debounce_task is not None:
                pending.append(self._debounce_task)
            if not pending:
                return
            await asyncio.wait(pending)

    async def aclose(self) -> None:
        self._cancel_timer()
        await self.join()
        self._listeners.clear()

    # -------------------------------------------------------------- internals

    def _trigger(self) -> None:
        self._cancel_timer()
        # Whatever is in flight now belongs to superseded input.
        self._current_request = None
        self._error = None
        self._request_state = RequestState.DEBOUNCING
        self._debounce_task = asyncio.create_task(self._debounce())
        self._notify()

    def _cancel_timer(self) -> None:
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None

    async def _debounce(self) -> None:
        await asyncio.sleep(self._debounce_seconds)
        self._debounce_task = None
        self._settle()

    def _settle(self) -> asyncio.Task | None:
        query, fetch_limit = self._state.query, self._state.fetch_limit
        if len(query.strip()) < self._min_query_length:
            self._current_request = None
            self._cache.clear()
            self._state.start = 0
            self._request_state = RequestState.IDLE
            self._notify()
            return None

        key = (query, fetch_limit)
        if key in self._inflight:
            seq, task = self._inflight[key]
            logger.debug("Reusing in-flight request #%s for %r limit=%s", seq, query, fetch_limit)
        else:
            self._sequence += 1
            seq = self._sequence
            logger.info("Request #%s namePrefix=%r limit=%s", seq, query, fetch_limit)
            task = asyncio.create_task(self._run_fetch(seq, query, fetch_limit))
            self._inflight[key] = (seq, task)
        self._current_request = seq
        self._request_state = RequestState.IN_FLIGHT
        self._notify()
        return task

    async def _run_fetch(self, seq: int, query: str, fetch_limit: int) -> None:
        try:
            result = await self._fetcher.fetch(query, fetch_limit)
        except Exception as exc:
            logger.exception("Fetcher raised for request #%s", seq)
            result = FetchResult.failure(FetchError(f"{type(exc).__name__}: {exc}"))
        finally:
            entry = self._inflight.get((query, fetch_limit))
            if entry is not None and entry[0] == seq:
                del self._inflight[(query, fetch_limit)]
        self._apply(seq, query, fetch_limit, result)

    def _apply(self, seq: int, query: str, fetch_limit: int, result: FetchResult) -> None:
        if seq != self._current_request or (query, fetch_limit) != (self._state.query, self._state.fetch_limit):
            logger.debug("Discarding stale response #%s for %r limit=%s", seq, query, fetch_limit)
            return
        self._current_request = None
        if result.ok:
            self._cache.replace(result.records, query, fetch_limit)
            self._error = None
            self._request_state = RequestState.SETTLED
            logger.info("Request #%s settled with %s records", seq, len(result.records))
        else:
            logger.warning(
                "Request #%s for %r limit=%s failed: %s", seq, query, fetch_limit, result.error.reason
            )
            self._cache.clear()
            self._error = FETCH_FAILED_MESSAGE
            self._request_state = RequestState.FAILED
        self._state.start = clamp_start(self._state.start, len(self._cache), self._state.page_size)
        self._notify()

    def _message(self, has_records: bool) -> str | None:
        if self._error:
            return self._error
        if len(self._state.query.strip()) < self._min_query_length:
            return MESSAGE_START
        if not has_records and self._request_state is not RequestState.IN_FLIGHT:
            return MESSAGE_NO_RESULTS
        return None

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener %r failed", listener)
