from __future__ import annotations

import asyncio
from typing import List

from snipdesk.core.exceptions import DomainError, StoreError
from snipdesk.core.models import Snippet
from snipdesk.storage import SnippetStorage

from .base import StoreBridge
from .clipboard import ClipboardSink, MemoryClipboard


class LocalStoreBridge(StoreBridge):
    """Store bridge backed by an in-process :class:`SnippetStorage`.

    Blocking file operations run in a worker thread so the event loop stays
    responsive. Storage errors are re-raised as ``StoreError``.
    """

    def __init__(self, storage: SnippetStorage, clipboard: ClipboardSink | None = None) -> None:
        self.storage = storage
        self.clipboard = clipboard or MemoryClipboard()

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except StoreError:
            raise
        except (DomainError, OSError) as exc:
            raise StoreError(str(exc)) from exc

    async def list_all(self) -> List[Snippet]:
        return await self._run(self.storage.list_all)

    async def get_one(self, snippet_id: str) -> Snippet:
        return await self._run(self.storage.get, snippet_id)

    async def search(self, query: str) -> List[Snippet]:
        return await self._run(self.storage.search, query)

    async def save(self, snippet: Snippet) -> None:
        await self._run(self.storage.save, snippet)

    async def delete(self, snippet_id: str) -> None:
        await self._run(self.storage.delete, snippet_id)

    async def reload(self) -> None:
        await self._run(self.storage.load_all)

    async def copy_to_clipboard(self, text: str) -> None:
        await self.clipboard.copy(text)


__all__ = ["LocalStoreBridge"]
