from __future__ import annotations

import logging
from typing import Awaitable, List, Optional, TypeVar

from snipdesk.bridge import StoreBridge
from snipdesk.core.exceptions import MutationFailure, StoreError
from snipdesk.core.languages import DEFAULT_REGISTRY, LanguageRegistry
from snipdesk.core.models import Snippet, new_snippet
from snipdesk.core.types import Confirm, Notify

from .capabilities import log_notify, resolve
from .edit_session import EditSession
from .guard import NavigationGuard
from .list_query import ListQuery, ListRow
from .messages import Messages

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FAILURE_KEYS = {
    "save": "failed_save",
    "delete": "failed_delete",
    "tag": "failed_tag",
    "favorite": "failed_favorite",
    "copy": "failed_copy",
    "create": "failed_create",
}


class SessionController:
    """Wires the list, the navigation guard and the edit session together.

    Owns the selected id and the invalidation token. Every durable mutation
    bumps the token so the list refetches; a save keeps the saved snippet
    selected and a delete clears the selection. Mutation failures are shown
    through ``notify`` and re-raised to the caller.
    """

    def __init__(
        self,
        bridge: StoreBridge,
        confirm: Confirm,
        notify: Notify | None = None,
        *,
        messages: Messages | None = None,
        registry: LanguageRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self.bridge = bridge
        self.notify = notify or log_notify
        self.messages = messages or Messages()
        self.selected_id: Optional[str] = None
        self.invalidation_token = 0
        self.list_query = ListQuery(bridge)
        self.session = EditSession(
            bridge,
            confirm,
            registry=registry,
            messages=self.messages,
            on_invalidate=self._invalidate,
            on_saved=self._on_saved,
            on_deleted=self._on_deleted,
            on_reload_failed=self._on_reload_failed,
        )
        self.guard = NavigationGuard(
            bridge,
            confirm,
            is_dirty=lambda: self.session.is_dirty,
            prompt=self.messages("confirm_discard"),
        )

    # ------------------------------------------------------------------
    # lifecycle and list
    async def start(self) -> None:
        await self.list_query.mount()

    def stop(self) -> None:
        self.list_query.unmount()

    async def search(self, text: str) -> None:
        await self.list_query.set_query(text)

    async def retry_list(self) -> None:
        await self.list_query.retry()

    def rows(self) -> List[ListRow]:
        return self.list_query.rows(self.selected_id)

    @property
    def list_error_text(self) -> str:
        error = self.list_query.error
        return self.messages("failed_load", error=str(error)) if error else ""

    @property
    def is_dirty(self) -> bool:
        return self.session.is_dirty

    # ------------------------------------------------------------------
    # selection
    async def select(self, snippet: Snippet) -> bool:
        """Make ``snippet`` the active one; ``False`` if it did not happen."""
        if snippet.id == self.selected_id and self.session.draft is not None:
            # going back to the open snippet cancels any switch still in flight
            self.guard.supersede(snippet.id)
            return True
        loaded = await self.guard.request(snippet)
        if loaded is None:
            return False
        self.session.load(loaded)
        self.selected_id = loaded.id
        logger.debug("Selected snippet", extra={"snippet_id": loaded.id})
        return True

    async def create(self, title: str) -> Optional[Snippet]:
        """Persist a brand-new snippet and select it."""
        if not await self.guard.confirm_leave():
            return None
        snippet = new_snippet(title)
        try:
            await self.bridge.save(snippet)
        except StoreError as exc:
            failure = MutationFailure("create", str(exc))
            await self._report(failure)
            raise failure from exc
        await self.session.refresh_store(snippet.id)
        try:
            persisted = await self.bridge.get_one(snippet.id)
        except StoreError:
            persisted = snippet
        self.guard.supersede(persisted.id)
        self.session.load(persisted)
        self.selected_id = persisted.id
        await self._invalidate()
        return persisted

    # ------------------------------------------------------------------
    # edits
    def edit_title(self, text: str) -> None:
        self.session.edit_title(text)

    def edit_body(self, text: str) -> None:
        self.session.edit_body(text)

    def edit_language(self, text: str) -> None:
        self.session.edit_language(text)

    def set_tag_input(self, text: str) -> None:
        self.session.set_tag_input(text)

    def toggle_raw_mode(self) -> bool:
        return self.session.toggle_raw_mode()

    async def add_tag(self, text: str | None = None) -> bool:
        return await self._reporting(self.session.add_tag(text))

    async def remove_tag(self, tag: str) -> bool:
        return await self._reporting(self.session.remove_tag(tag))

    async def toggle_favorite(self) -> bool:
        return await self._reporting(self.session.toggle_favorite())

    async def save(self) -> Snippet:
        return await self._reporting(self.session.save())

    async def delete(self) -> bool:
        return await self._reporting(self.session.delete())

    async def copy_body(self) -> None:
        await self._reporting(self.session.copy_body())
        await resolve(self.notify(self.messages("copied")))

    # ------------------------------------------------------------------
    # session listeners
    async def _invalidate(self) -> None:
        self.invalidation_token += 1
        await self.list_query.invalidate(self.invalidation_token)

    async def _on_saved(self, snippet: Snippet) -> None:
        # a save that finishes after navigating away must not steal the selection
        draft = self.session.draft
        if draft is not None and draft.id == snippet.id:
            self.selected_id = snippet.id
        await self._invalidate()

    async def _on_deleted(self, snippet_id: str) -> None:
        if self.selected_id == snippet_id:
            self.selected_id = None
            self.guard.supersede()
        await self._invalidate()

    async def _on_reload_failed(self, error: str) -> None:
        await resolve(self.notify(self.messages("failed_reload", error=error)))

    async def _reporting(self, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except MutationFailure as exc:
            await self._report(exc)
            raise

    async def _report(self, exc: MutationFailure) -> None:
        key = _FAILURE_KEYS.get(exc.operation, "failed_save")
        await resolve(self.notify(self.messages(key, error=exc.message)))


__all__ = ["SessionController"]
