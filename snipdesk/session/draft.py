"""Session-local draft of the snippet under edit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from snipdesk.core.models import Snippet
from snipdesk.storage.frontmatter import render_frontmatter


DEFERRED_FIELDS = ("title", "body", "language")


class SessionEvent(str, Enum):
    LOADED = "loaded"
    SAVED = "saved"
    EDITED = "edited"  # title, body or language
    TAGGED = "tagged"
    FAVORITED = "favorited"


def compute_dirty(previous: bool, event: SessionEvent) -> bool:
    """Next dirty flag after ``event``.

    Only deferred-field edits make a draft dirty, and only a fresh load or a
    successful save make it clean again. Tag and favorite changes are
    persisted immediately and leave the flag as it was.
    """
    if event in (SessionEvent.LOADED, SessionEvent.SAVED):
        return False
    if event is SessionEvent.EDITED:
        return True
    return previous


@dataclass
class Draft:
    id: str
    title: str
    tags: List[str]
    language: str
    is_favorite: bool
    created_at: str
    updated_at: str
    body: str
    tag_input: str = ""
    is_dirty: bool = False
    raw_mode_active: bool = False
    _baseline: Snippet | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_snippet(cls, snippet: Snippet) -> "Draft":
        return cls(
            id=snippet.id,
            title=snippet.title,
            tags=list(snippet.tags),
            language=snippet.language,
            is_favorite=snippet.is_favorite,
            created_at=snippet.created_at,
            updated_at=snippet.updated_at,
            body=snippet.body,
            _baseline=snippet.model_copy(deep=True),
        )

    @property
    def baseline(self) -> Snippet | None:
        """The last persisted copy this draft was loaded from."""
        return self._baseline

    def changed_fields(self) -> List[str]:
        """Deferred fields whose value differs from the baseline."""
        if self._baseline is None:
            return list(DEFERRED_FIELDS)
        return [name for name in DEFERRED_FIELDS if getattr(self, name) != getattr(self._baseline, name)]

    def to_snippet(self) -> Snippet:
        return Snippet(
            id=self.id,
            title=self.title,
            tags=list(self.tags),
            language=self.language,
            is_favorite=self.is_favorite,
            created_at=self.created_at,
            updated_at=self.updated_at,
            body=self.body,
        )

    def apply(self, event: SessionEvent) -> None:
        self.is_dirty = compute_dirty(self.is_dirty, event)

    @property
    def raw_mode_text(self) -> str:
        # display only, never parsed back into the draft
        return render_frontmatter(self.to_snippet()) if self.raw_mode_active else ""


__all__ = ["Draft", "SessionEvent", "compute_dirty"]
