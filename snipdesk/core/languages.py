"""Closed registry mapping a snippet's free-text language to an editor mode."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class EditorMode:
    """Syntax mode handed to the code-editing widget."""

    name: str
    label: str
    aliases: Tuple[str, ...] = ()
    options: Mapping[str, bool] = field(default_factory=dict)


PLAIN_TEXT = EditorMode(name="plaintext", label="Plain text")


class LanguageRegistry:
    """Immutable lookup from language identifiers to :class:`EditorMode`.

    Lookups are case-insensitive and ignore surrounding whitespace. Unknown
    or empty identifiers resolve to the fallback mode (plain text).
    """

    def __init__(self, modes: Iterable[EditorMode], fallback: EditorMode = PLAIN_TEXT) -> None:
        table: Dict[str, EditorMode] = {}
        for mode in modes:
            for key in (mode.name, *mode.aliases):
                key = key.strip().lower()
                if key in table:
                    raise ValueError(f"duplicate language key: {key}")
                table[key] = mode
        self._table = MappingProxyType(table)
        self.fallback = fallback

    def resolve(self, language: str | None) -> EditorMode:
        key = (language or "").strip().lower()
        return self._table.get(key, self.fallback)

    def is_known(self, language: str | None) -> bool:
        return (language or "").strip().lower() in self._table

    @property
    def modes(self) -> Tuple[EditorMode, ...]:
        seen: Dict[str, EditorMode] = {}
        for mode in self._table.values():
            seen.setdefault(mode.name, mode)
        return tuple(seen.values())


DEFAULT_REGISTRY = LanguageRegistry(
    [
        EditorMode("javascript", "JavaScript", aliases=("js",)),
        EditorMode("typescript", "TypeScript", aliases=("ts",), options={"jsx": True}),
        EditorMode("python", "Python", aliases=("py",)),
        EditorMode("yaml", "YAML", aliases=("yml",)),
        EditorMode("json", "JSON"),
        EditorMode("markdown", "Markdown", aliases=("md",)),
    ]
)

__all__ = ["EditorMode", "LanguageRegistry", "PLAIN_TEXT", "DEFAULT_REGISTRY"]
