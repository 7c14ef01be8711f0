from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from snipdesk.core.exceptions import SnippetNotFound, StoreError
from snipdesk.core.models import Snippet

from .base import StoreBridge
from .clipboard import ClipboardSink, MemoryClipboard


class HttpStoreBridge(StoreBridge):
    """Store bridge talking to the snippet API over HTTP.

    A ``404`` becomes :class:`SnippetNotFound`; any other HTTP status or
    transport error becomes :class:`StoreError`. The clipboard stays local.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str = "",
        timeout: float = 5.0,
        clipboard: ClipboardSink | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"X-Api-Token": api_token} if api_token else {}
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout
        )
        self.clipboard = clipboard or MemoryClipboard()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        snippet_id: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"{method} {url}: {exc}") from exc
        if response.status_code == 404 and snippet_id is not None:
            raise SnippetNotFound(snippet_id)
        if response.is_error:
            raise StoreError(f"{method} {url}: HTTP {response.status_code} {_detail(response)}")
        return response

    @staticmethod
    def _snippets(response: httpx.Response) -> List[Snippet]:
        return [Snippet.model_validate(item) for item in response.json()]

    async def list_all(self) -> List[Snippet]:
        return self._snippets(await self._request("GET", "/snippets"))

    async def get_one(self, snippet_id: str) -> Snippet:
        response = await self._request("GET", f"/snippets/{snippet_id}", snippet_id=snippet_id)
        return Snippet.model_validate(response.json())

    async def search(self, query: str) -> List[Snippet]:
        return self._snippets(await self._request("GET", "/snippets/search", params={"q": query}))

    async def save(self, snippet: Snippet) -> None:
        await self._request("PUT", f"/snippets/{snippet.id}", json=snippet.model_dump())

    async def delete(self, snippet_id: str) -> None:
        await self._request("DELETE", f"/snippets/{snippet_id}", snippet_id=snippet_id)

    async def reload(self) -> None:
        await self._request("POST", "/snippets/reload")

    async def copy_to_clipboard(self, text: str) -> None:
        await self.clipboard.copy(text)


def _detail(response: httpx.Response) -> str:
    try:
        data: Dict[str, Any] = response.json()
    except ValueError:
        return response.text[:200]
    return str(data.get("detail", "")) if isinstance(data, dict) else ""


__all__ = ["HttpStoreBridge"]
