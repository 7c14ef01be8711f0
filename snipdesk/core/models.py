"""Pydantic models representing core domain entities."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field

from .exceptions import ValidationError


def utc_timestamp(dt: datetime | None = None) -> str:
    """Return a sortable, timezone-aware ISO-8601 timestamp string."""
    dt = dt or datetime.now(timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="seconds")


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp; naive values are treated as UTC."""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class Snippet(BaseModel):
    """A code snippet with metadata, as persisted by the store."""

    id: str = Field(..., description="Opaque stable identifier")
    title: str
    tags: List[str] = Field(default_factory=list)
    language: str = ""
    is_favorite: bool = False
    created_at: str = Field(default_factory=utc_timestamp)
    updated_at: str = Field(default_factory=utc_timestamp)
    body: str = ""


def new_snippet(title: str) -> Snippet:
    """Create a snippet with a generated id and matching timestamps."""
    now = utc_timestamp()
    return Snippet(id=uuid.uuid4().hex, title=title, created_at=now, updated_at=now)


def validate_snippet(snippet: Snippet) -> None:
    if not snippet.id:
        raise ValidationError("id", "ID cannot be empty")
    if not snippet.title:
        raise ValidationError("title", "Title cannot be empty")


__all__ = ["Snippet", "new_snippet", "validate_snippet", "utc_timestamp", "parse_timestamp"]
