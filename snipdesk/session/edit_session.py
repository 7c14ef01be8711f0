from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from snipdesk.bridge import StoreBridge
from snipdesk.core.exceptions import MutationFailure, NoActiveSnippet, StoreError
from snipdesk.core.languages import DEFAULT_REGISTRY, EditorMode, LanguageRegistry
from snipdesk.core.models import Snippet
from snipdesk.core.types import Confirm

from .capabilities import ask, resolve
from .draft import Draft, SessionEvent
from .messages import Messages

logger = logging.getLogger(__name__)

Listener = Callable[..., Optional[Awaitable[Any]]]


class EditSession:
    """Holds the single draft under edit and persists it.

    Title, body and language are *deferred*: edits only mark the draft dirty
    until :meth:`save`. Tags and the favorite flag are *immediate*: every
    change saves the whole draft right away and asks the list to refresh.

    Listeners:
    - ``on_invalidate()`` after an immediate-path save
    - ``on_saved(snippet)`` after an explicit save, with the persisted copy
    - ``on_deleted(snippet_id)`` after a delete
    - ``on_reload_failed(error)`` when the store took a write but could not
      refresh its index afterwards
    """

    def __init__(
        self,
        bridge: StoreBridge,
        confirm: Confirm,
        *,
        registry: LanguageRegistry = DEFAULT_REGISTRY,
        messages: Messages | None = None,
        on_invalidate: Listener | None = None,
        on_saved: Listener | None = None,
        on_deleted: Listener | None = None,
        on_reload_failed: Listener | None = None,
    ) -> None:
        self.bridge = bridge
        self.confirm = confirm
        self.registry = registry
        self.messages = messages or Messages()
        self.on_invalidate = on_invalidate
        self.on_saved = on_saved
        self.on_deleted = on_deleted
        self.on_reload_failed = on_reload_failed
        self._draft: Draft | None = None

    # ------------------------------------------------------------------
    # state
    @property
    def draft(self) -> Draft | None:
        return self._draft

    @property
    def is_dirty(self) -> bool:
        return self._draft is not None and self._draft.is_dirty

    @property
    def editor_mode(self) -> EditorMode:
        language = self._draft.language if self._draft else ""
        return self.registry.resolve(language)

    def load(self, snippet: Snippet) -> None:
        """Replace the draft wholesale with a fresh copy of ``snippet``."""
        draft = Draft.from_snippet(snippet)
        draft.apply(SessionEvent.LOADED)
        self._draft = draft

    def clear(self) -> None:
        self._draft = None

    def _require(self) -> Draft:
        if self._draft is None:
            raise NoActiveSnippet("no snippet is selected")
        return self._draft

    # ------------------------------------------------------------------
    # deferred fields
    def edit_title(self, text: str) -> None:
        draft = self._require()
        draft.title = text
        draft.apply(SessionEvent.EDITED)

    def edit_body(self, text: str) -> None:
        draft = self._require()
        draft.body = text
        draft.apply(SessionEvent.EDITED)

    def edit_language(self, text: str) -> None:
        draft = self._require()
        draft.language = text
        draft.apply(SessionEvent.EDITED)

    def set_tag_input(self, text: str) -> None:
        self._require().tag_input = text

    def toggle_raw_mode(self) -> bool:
        draft = self._require()
        draft.raw_mode_active = not draft.raw_mode_active
        return draft.raw_mode_active

    # ------------------------------------------------------------------
    # immediate fields
    async def add_tag(self, text: str | None = None) -> bool:
        """Append a tag and persist at once.

        ``text`` defaults to the pending tag input. Empty or duplicate tags
        are ignored without touching the store. On failure the tag is taken
        back out and the tag input restored.
        """
        draft = self._require()
        tag = (draft.tag_input if text is None else text).strip()
        if not tag or tag in draft.tags:
            return False

        previous_input = draft.tag_input
        draft.tags.append(tag)
        draft.tag_input = ""
        try:
            await self._persist_immediate(draft, "tag", SessionEvent.TAGGED)
        except MutationFailure:
            draft.tags.remove(tag)
            draft.tag_input = previous_input
            raise
        return True

    async def remove_tag(self, tag: str) -> bool:
        draft = self._require()
        if tag not in draft.tags:
            return False
        index = draft.tags.index(tag)
        del draft.tags[index]
        try:
            await self._persist_immediate(draft, "tag", SessionEvent.TAGGED)
        except MutationFailure:
            draft.tags.insert(index, tag)
            raise
        return True

    async def toggle_favorite(self) -> bool:
        draft = self._require()
        draft.is_favorite = not draft.is_favorite
        try:
            await self._persist_immediate(draft, "favorite", SessionEvent.FAVORITED)
        except MutationFailure:
            draft.is_favorite = not draft.is_favorite
            raise
        return draft.is_favorite

    async def _persist_immediate(self, draft: Draft, operation: str, event: SessionEvent) -> None:
        # the full draft goes out, deferred edits included, but stays dirty
        try:
            await self.bridge.save(draft.to_snippet())
        except StoreError as exc:
            logger.warning(
                "Immediate save failed",
                extra={"operation": operation, "snippet_id": draft.id},
                exc_info=exc,
            )
            raise MutationFailure(operation, str(exc)) from exc
        draft.apply(event)
        await self.refresh_store(draft.id)
        await resolve(self.on_invalidate and self.on_invalidate())

    async def refresh_store(self, snippet_id: str) -> bool:
        """Ask the store to rebuild its index after a successful write.

        The write is already durable here, so a failure is only reported
        through ``on_reload_failed`` and never undoes the draft.
        """
        try:
            await self.bridge.reload()
        except StoreError as exc:
            logger.warning(
                "Reload after write failed", extra={"snippet_id": snippet_id}, exc_info=exc
            )
            await resolve(self.on_reload_failed and self.on_reload_failed(str(exc)))
            return False
        return True

    # ------------------------------------------------------------------
    # explicit actions
    async def save(self) -> Snippet:
        """Persist the full draft and re-baseline it as clean.

        Returns the stored copy (or the locally merged one when the store
        cannot hand it back) so the caller can keep it selected.
        """
        draft = self._require()
        sent = draft.to_snippet()
        changed = draft.changed_fields()
        try:
            await self.bridge.save(sent)
        except StoreError as exc:
            logger.warning("Save failed", extra={"snippet_id": sent.id}, exc_info=exc)
            raise MutationFailure("save", str(exc)) from exc
        await self.refresh_store(sent.id)

        try:
            persisted = await self.bridge.get_one(sent.id)
        except StoreError as exc:
            logger.warning("Using local copy after save: %s", exc, extra={"snippet_id": sent.id})
            persisted = sent

        if self._draft is draft:
            fresh = Draft.from_snippet(persisted)
            fresh.tag_input = draft.tag_input
            fresh.raw_mode_active = draft.raw_mode_active
            fresh.apply(SessionEvent.SAVED)
            self._draft = fresh
        logger.info("Snippet saved", extra={"snippet_id": sent.id, "changed": changed})
        await resolve(self.on_saved and self.on_saved(persisted))
        return persisted

    async def delete(self) -> bool:
        """Delete the current snippet after the user confirms."""
        draft = self._require()
        if not await ask(self.confirm, self.messages("confirm_delete")):
            return False
        try:
            await self.bridge.delete(draft.id)
        except StoreError as exc:
            logger.warning("Delete failed", extra={"snippet_id": draft.id}, exc_info=exc)
            raise MutationFailure("delete", str(exc)) from exc
        await self.refresh_store(draft.id)

        if self._draft is draft:
            self._draft = None
        logger.info("Snippet deleted", extra={"snippet_id": draft.id})
        await resolve(self.on_deleted and self.on_deleted(draft.id))
        return True

    async def copy_body(self) -> None:
        draft = self._require()
        try:
            await self.bridge.copy_to_clipboard(draft.body)
        except StoreError as exc:
            raise MutationFailure("copy", str(exc)) from exc


__all__ = ["EditSession"]
