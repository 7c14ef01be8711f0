"""Markdown documents with a YAML frontmatter header."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict

import yaml

from snipdesk.core.models import Snippet, utc_timestamp

DELIMITER = "---"

FRONT_FIELDS = ("id", "title", "tags", "language", "is_favorite", "created_at", "updated_at")


class FrontmatterError(ValueError):
    """Raised when a document has no well-formed frontmatter block."""


def _as_timestamp(value: Any) -> str:
    # YAML turns unquoted ISO timestamps into datetime objects
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return utc_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value) if value is not None else ""


def render_frontmatter(snippet: Snippet) -> str:
    """Serialize ``snippet`` to a frontmatter + body document."""

    front: Dict[str, Any] = {name: getattr(snippet, name) for name in FRONT_FIELDS}
    header = yaml.safe_dump(front, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"{DELIMITER}\n{header}{DELIMITER}\n\n{snippet.body}"


def parse_frontmatter(text: str) -> Snippet:
    """Parse a document produced by :func:`render_frontmatter`."""

    lines = text.split("\n")
    if not lines or lines[0].strip() != DELIMITER:
        raise FrontmatterError("file does not start with frontmatter delimiter")

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        raise FrontmatterError("frontmatter delimiter not closed")

    try:
        front = yaml.safe_load("\n".join(lines[1:end])) or {}
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"failed to parse frontmatter: {exc}") from exc
    if not isinstance(front, dict):
        raise FrontmatterError("frontmatter is not a mapping")

    body = "\n".join(lines[end + 1 :])
    if body.startswith("\n"):
        body = body[1:]

    tags = front.get("tags") or []
    return Snippet(
        id=str(front.get("id") or ""),
        title=str(front.get("title") or ""),
        tags=[str(t) for t in tags],
        language=str(front.get("language") or ""),
        is_favorite=bool(front.get("is_favorite", False)),
        created_at=_as_timestamp(front.get("created_at")),
        updated_at=_as_timestamp(front.get("updated_at")),
        body=body,
    )


__all__ = ["render_frontmatter", "parse_frontmatter", "FrontmatterError"]
