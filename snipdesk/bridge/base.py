from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from snipdesk.core.models import Snippet


class StoreBridge(ABC):
    """Asynchronous interface to the snippet store.

    Every call may fail; failures are raised as
    :class:`~snipdesk.core.exceptions.StoreError` (``SnippetNotFound`` for a
    missing id).
    """

    @abstractmethod
    async def list_all(self) -> List[Snippet]:
        """Return the full collection in store-determined order."""

    @abstractmethod
    async def get_one(self, snippet_id: str) -> Snippet:
        """Return the authoritative copy of one snippet."""

    @abstractmethod
    async def search(self, query: str) -> List[Snippet]:
        """Return snippets matching ``query`` in relevance order."""

    @abstractmethod
    async def save(self, snippet: Snippet) -> None:
        """Upsert the full record by id."""

    @abstractmethod
    async def delete(self, snippet_id: str) -> None:
        """Delete a snippet by id."""

    @abstractmethod
    async def reload(self) -> None:
        """Ask the store to refresh its caches after a mutation."""

    @abstractmethod
    async def copy_to_clipboard(self, text: str) -> None:
        """Hand ``text`` to the clipboard sink."""


__all__ = ["StoreBridge"]
