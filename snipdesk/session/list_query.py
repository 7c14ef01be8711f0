from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from snipdesk.bridge import StoreBridge
from snipdesk.core.exceptions import LoadFailure, StoreError
from snipdesk.core.models import Snippet

from .capabilities import resolve

logger = logging.getLogger(__name__)


class ListState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class ListRow:
    snippet: Snippet
    selected: bool


class ListQuery:
    """The snippet collection shown next to the editor.

    An empty query (after trimming) lists everything; anything else is sent
    to the store's search as typed. Every query change, invalidation token or
    retry issues a fresh round trip. Responses are tagged with a generation
    so an older response never overwrites a newer one.
    """

    def __init__(
        self,
        bridge: StoreBridge,
        on_change: Callable[["ListQuery"], Optional[Awaitable[Any]]] | None = None,
    ) -> None:
        self.bridge = bridge
        self.on_change = on_change
        self.items: List[Snippet] = []
        self.query_text = ""
        self.invalidation_token = 0
        self.state = ListState.IDLE
        self.error: LoadFailure | None = None
        self.mounted = False
        self._generation = 0

    @property
    def loading(self) -> bool:
        return self.state is ListState.LOADING

    @property
    def is_empty(self) -> bool:
        return self.state is ListState.LOADED and not self.items

    async def mount(self) -> None:
        self.mounted = True
        await self._fetch()

    def unmount(self) -> None:
        self.mounted = False
        self._generation += 1
        self.items = []
        self.error = None
        self.state = ListState.IDLE

    async def set_query(self, text: str) -> None:
        if text == self.query_text and self.state is not ListState.IDLE:
            return
        self.query_text = text
        if self.mounted:
            await self._fetch()

    async def invalidate(self, token: int | None = None) -> None:
        """Refetch for a newer invalidation token (defaults to the next one)."""
        token = self.invalidation_token + 1 if token is None else token
        if token <= self.invalidation_token:
            return
        self.invalidation_token = token
        if self.mounted:
            await self._fetch()

    async def retry(self) -> None:
        if self.mounted:
            await self._fetch()

    def rows(self, selected_id: str | None) -> List[ListRow]:
        return [ListRow(s, s.id == selected_id) for s in self.items]

    # ------------------------------------------------------------------
    async def _fetch(self) -> None:
        self._generation += 1
        generation = self._generation
        query = self.query_text
        self.state = ListState.LOADING
        self.error = None
        await self._changed()

        try:
            if query.strip():
                result = await self.bridge.search(query)
            else:
                result = await self.bridge.list_all()
        except StoreError as exc:
            if generation != self._generation:
                return
            logger.warning("Snippet list fetch failed: %s", exc, extra={"query": query})
            self.state = ListState.FAILED
            self.error = LoadFailure(str(exc))
            await self._changed()
            return

        if generation != self._generation:
            logger.debug("Dropping stale list response", extra={"query": query})
            return
        self.items = list(result)
        self.state = ListState.LOADED
        await self._changed()

    async def _changed(self) -> None:
        if self.on_change is not None:
            await resolve(self.on_change(self))


__all__ = ["ListQuery", "ListState", "ListRow"]
