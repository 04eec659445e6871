"""In-process registry of live queries, re-evaluated on change notifications."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from wordflight_chat.application.dto.snapshot import QuerySnapshot, diff_snapshot
from wordflight_chat.application.ports.store import ErrorCallback, SnapshotCallback
from wordflight_chat.domain.value_objects.enums import Collection

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetch = Callable[[], Awaitable[list[T]]]


class LiveQuery(Generic[T]):
    """One listener: remembers its last result and pushes diffs against it."""

    def __init__(
        self,
        hub: LiveQueryHub,
        collection: Collection,
        room_id: str | None,
        fetch: Fetch[T],
        on_snapshot: SnapshotCallback[T],
        on_error: ErrorCallback | None,
    ) -> None:
        self._hub = hub
        self.collection = collection
        self.room_id = room_id
        self._fetch = fetch
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._docs: list[T] = []
        self._delivered = False
        self._active = True
        self._lock = asyncio.Lock()

    @property
    def active(self) -> bool:
        return self._active

    def matches(self, collection: Collection, room_id: str | None) -> bool:
        if collection != self.collection:
            return False
        return room_id is None or self.room_id is None or room_id == self.room_id

    def close(self) -> None:
        if not self._active:
            return
        self._active = False
        self._hub.discard(self)

    def __enter__(self) -> LiveQuery[T]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    async def refresh(self) -> None:
        if not self._active:
            return
        async with self._lock:
            try:
                docs = await self._fetch()
            except Exception as exc:
                self._report(exc)
                return
            # Closed while the query was in flight.
            if not self._active:
                return
            snapshot: QuerySnapshot[T] = diff_snapshot(self._docs, docs)  # type: ignore[arg-type]
            self._docs = docs
            if self._delivered and not snapshot.changes:
                return
            self._delivered = True
            try:
                await self._on_snapshot(snapshot)
            except Exception as exc:
                self._report(exc)

    def _report(self, exc: Exception) -> None:
        if self._on_error is not None:
            self._on_error(exc)
        else:
            logger.error(
                "Live query on %s failed", self.collection, exc_info=exc,
            )


class LiveQueryHub:
    """Tracks every live query of this process and refreshes the affected ones."""

    def __init__(self) -> None:
        self._queries: set[LiveQuery[Any]] = set()
        self._network_enabled = True

    def __len__(self) -> int:
        return len(self._queries)

    @property
    def network_enabled(self) -> bool:
        return self._network_enabled

    async def register(
        self,
        collection: Collection,
        fetch: Fetch[T],
        on_snapshot: SnapshotCallback[T],
        on_error: ErrorCallback | None = None,
        *,
        room_id: str | None = None,
    ) -> LiveQuery[T]:
        query = LiveQuery(self, collection, room_id, fetch, on_snapshot, on_error)
        self._queries.add(query)
        logger.debug("Live query registered on %s room=%s", collection, room_id)
        if self._network_enabled:
            await query.refresh()
        return query

    def discard(self, query: LiveQuery[Any]) -> None:
        self._queries.discard(query)

    async def notify(self, collection: Collection, room_id: str | None = None) -> None:
        """Re-run every live query a change to ``collection`` may affect."""
        if not self._network_enabled:
            return
        for query in [q for q in self._queries if q.matches(collection, room_id)]:
            await query.refresh()

    async def refresh_all(self) -> None:
        for query in list(self._queries):
            await query.refresh()

    def disable_network(self) -> None:
        if self._network_enabled:
            logger.warning("Store network disabled; live queries paused")
        self._network_enabled = False

    async def enable_network(self) -> None:
        was_disabled = not self._network_enabled
        self._network_enabled = True
        if was_disabled:
            logger.info("Store network enabled; refreshing %d live queries", len(self._queries))
            await self.refresh_all()
