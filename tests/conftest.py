import sys
from pathlib import Path
from typing import Dict, List, Set

import pytest

# Ensure project root on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from snipdesk.bridge import MemoryClipboard, StoreBridge
from snipdesk.core.exceptions import SnippetNotFound, StoreError
from snipdesk.core.models import Snippet


class FakeStoreBridge(StoreBridge):
    """In-memory bridge recording every call; ``fail`` holds op names to break."""

    def __init__(self, snippets: List[Snippet] | None = None) -> None:
        self.snippets: Dict[str, Snippet] = {s.id: s.model_copy(deep=True) for s in snippets or []}
        self.calls: List[tuple] = []
        self.fail: Set[str] = set()
        self.clipboard = MemoryClipboard()
        self.search_results: Dict[str, List[Snippet]] = {}

    def _check(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        if op in self.fail:
            raise StoreError(f"{op} unavailable")

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    async def list_all(self) -> List[Snippet]:
        self._check("list_all")
        return [s.model_copy(deep=True) for s in self.snippets.values()]

    async def get_one(self, snippet_id: str) -> Snippet:
        self._check("get_one", snippet_id)
        if snippet_id not in self.snippets:
            raise SnippetNotFound(snippet_id)
        return self.snippets[snippet_id].model_copy(deep=True)

    async def search(self, query: str) -> List[Snippet]:
        self._check("search", query)
        return [s.model_copy(deep=True) for s in self.search_results.get(query, [])]

    async def save(self, snippet: Snippet) -> None:
        self._check("save", snippet.model_copy(deep=True))
        stored = snippet.model_copy(deep=True)
        stored.updated_at = "2024-06-01T12:00:00+00:00"
        self.snippets[snippet.id] = stored

    async def delete(self, snippet_id: str) -> None:
        self._check("delete", snippet_id)
        if snippet_id not in self.snippets:
            raise SnippetNotFound(snippet_id)
        del self.snippets[snippet_id]

    async def reload(self) -> None:
        self._check("reload")

    async def copy_to_clipboard(self, text: str) -> None:
        self._check("copy_to_clipboard", text)
        await self.clipboard.copy(text)


def make_snippet(snippet_id: str = "a", **fields) -> Snippet:
    data = {
        "id": snippet_id,
        "title": f"Snippet {snippet_id.upper()}",
        "tags": [],
        "language": "python",
        "is_favorite": False,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
        "body": f"print('{snippet_id}')",
    }
    data.update(fields)
    return Snippet(**data)


@pytest.fixture()
def snippet_a() -> Snippet:
    return make_snippet("a", tags=["x"])


@pytest.fixture()
def snippet_b() -> Snippet:
    return make_snippet("b", title="Docker compose", tags=["docker"], language="yaml")


@pytest.fixture()
def bridge(snippet_a: Snippet, snippet_b: Snippet) -> FakeStoreBridge:
    return FakeStoreBridge([snippet_a, snippet_b])
