from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from snipdesk.bridge import StoreBridge
from snipdesk.core.exceptions import StoreError
from snipdesk.core.models import Snippet
from snipdesk.core.types import Confirm

from .capabilities import ask

logger = logging.getLogger(__name__)


class GuardState(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"


class GuardEvent(str, Enum):
    SELECT = "select"
    EDIT = "edit"
    SAVE = "save"
    DELETE = "delete"
    LOAD = "load"


class GuardAction(str, Enum):
    PROCEED = "proceed"
    CONFIRM = "confirm"


# (state, event) -> (state once the event goes through, action needed first).
# A declined confirmation leaves the state unchanged.
TRANSITIONS: Dict[Tuple[GuardState, GuardEvent], Tuple[GuardState, GuardAction]] = {
    (GuardState.CLEAN, GuardEvent.SELECT): (GuardState.CLEAN, GuardAction.PROCEED),
    (GuardState.DIRTY, GuardEvent.SELECT): (GuardState.CLEAN, GuardAction.CONFIRM),
    (GuardState.CLEAN, GuardEvent.EDIT): (GuardState.DIRTY, GuardAction.PROCEED),
    (GuardState.DIRTY, GuardEvent.EDIT): (GuardState.DIRTY, GuardAction.PROCEED),
    (GuardState.CLEAN, GuardEvent.SAVE): (GuardState.CLEAN, GuardAction.PROCEED),
    (GuardState.DIRTY, GuardEvent.SAVE): (GuardState.CLEAN, GuardAction.PROCEED),
    (GuardState.CLEAN, GuardEvent.DELETE): (GuardState.CLEAN, GuardAction.PROCEED),
    (GuardState.DIRTY, GuardEvent.DELETE): (GuardState.CLEAN, GuardAction.PROCEED),
    (GuardState.CLEAN, GuardEvent.LOAD): (GuardState.CLEAN, GuardAction.PROCEED),
    (GuardState.DIRTY, GuardEvent.LOAD): (GuardState.CLEAN, GuardAction.PROCEED),
}


def transition(state: GuardState, event: GuardEvent) -> Tuple[GuardState, GuardAction]:
    return TRANSITIONS[(state, event)]


class NavigationGuard:
    """Protects unsaved deferred edits when the selection changes.

    The dirty state is read from the edit session through ``is_dirty``, so
    the session's re-baseline after a save or delete is what cleans the
    guard. Every approved navigation is tagged with a generation number;
    a fetch whose generation has been superseded is discarded.
    """

    def __init__(
        self,
        bridge: StoreBridge,
        confirm: Confirm,
        is_dirty: Callable[[], bool],
        prompt: str,
    ) -> None:
        self.bridge = bridge
        self.confirm = confirm
        self.is_dirty = is_dirty
        self.prompt = prompt
        self._generation = 0
        self.target_id: Optional[str] = None

    @property
    def state(self) -> GuardState:
        return GuardState.DIRTY if self.is_dirty() else GuardState.CLEAN

    async def confirm_leave(self) -> bool:
        """Return whether the current draft may be replaced."""
        _, action = transition(self.state, GuardEvent.SELECT)
        if action is GuardAction.PROCEED:
            return True
        approved = await ask(self.confirm, self.prompt)
        if not approved:
            logger.info("Navigation declined, keeping unsaved draft")
        return approved

    def supersede(self, target_id: Optional[str] = None) -> int:
        """Start a new generation, invalidating any navigation in flight."""
        self._generation += 1
        self.target_id = target_id
        return self._generation

    async def request(self, snippet: Snippet) -> Optional[Snippet]:
        """Arbitrate a request to select ``snippet``.

        Returns the copy to load, or ``None`` when the user declined or a
        newer request superseded this one. The authoritative copy is fetched
        by id; when that fails the list-provided copy is used instead.
        """
        if not await self.confirm_leave():
            return None

        generation = self.supersede(snippet.id)
        try:
            fresh = await self.bridge.get_one(snippet.id)
        except StoreError as exc:
            logger.warning(
                "Falling back to list copy: %s", exc, extra={"snippet_id": snippet.id}
            )
            fresh = snippet.model_copy(deep=True)

        if generation != self._generation:
            logger.debug("Dropping superseded selection", extra={"snippet_id": snippet.id})
            return None
        return fresh


__all__ = [
    "GuardState",
    "GuardEvent",
    "GuardAction",
    "TRANSITIONS",
    "transition",
    "NavigationGuard",
]
