from __future__ import annotations

import hmac
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from fastapi import Depends, FastAPI, Header, HTTPException, Query, status

from snipdesk.core.exceptions import NotFoundError, ValidationError
from snipdesk.core.models import Snippet
from snipdesk.core.settings import get_settings
from snipdesk.logging import setup_logging
from snipdesk.storage import SnippetStorage

_storage: SnippetStorage | None = None


# ---------------------------------------------------------------------------
# Dependency factories


def get_storage() -> SnippetStorage:
    """Process-wide store, loaded from disk on first use."""
    global _storage
    if _storage is None:
        _storage = SnippetStorage(get_settings().data_dir)
        _storage.load_all()
    return _storage


async def check_token(token: str | None = Header(None, alias="X-Api-Token")) -> None:
    expected = get_settings().api_token
    if not expected:
        return
    if not token or not hmac.compare_digest(token, expected):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Invalid API token")


# ---------------------------------------------------------------------------
# FastAPI application


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    yield


app = FastAPI(title="SnipDesk API", lifespan=lifespan)


# Routes ---------------------------------------------------------------------


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/snippets", dependencies=[Depends(check_token)])
def list_snippets(storage: SnippetStorage = Depends(get_storage)) -> List[Snippet]:
    return storage.list_all()


@app.get("/snippets/search", dependencies=[Depends(check_token)])
def search_snippets(
    q: str = Query(""),
    storage: SnippetStorage = Depends(get_storage),
) -> List[Snippet]:
    return storage.search(q)


@app.post("/snippets/reload", dependencies=[Depends(check_token)])
def reload_snippets(storage: SnippetStorage = Depends(get_storage)) -> Dict[str, Any]:
    storage.load_all()
    return {"status": "ok", "count": len(storage.list_all())}


@app.get("/snippets/{snippet_id}", dependencies=[Depends(check_token)])
def get_snippet(snippet_id: str, storage: SnippetStorage = Depends(get_storage)) -> Snippet:
    try:
        return storage.get(snippet_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Snippet not found")


@app.put("/snippets/{snippet_id}", dependencies=[Depends(check_token)])
def save_snippet(
    snippet_id: str,
    snippet: Snippet,
    storage: SnippetStorage = Depends(get_storage),
) -> Snippet:
    if snippet.id != snippet_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Snippet id mismatch"
        )
    try:
        return storage.save(snippet)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@app.delete("/snippets/{snippet_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(check_token)])
def delete_snippet(snippet_id: str, storage: SnippetStorage = Depends(get_storage)) -> None:
    try:
        storage.delete(snippet_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Snippet not found")


__all__ = ["app", "get_storage"]
