from __future__ import annotations

import logging
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from snipdesk.core.exceptions import SnippetNotFound, ValidationError
from snipdesk.core.models import Snippet, parse_timestamp, utc_timestamp, validate_snippet

from .frontmatter import FrontmatterError, parse_frontmatter, render_frontmatter
from .search import SearchResult, search_snippets

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[ /\\:*?"<>|]')


class SnippetStorage:
    """File system based storage for snippets as Markdown with YAML frontmatter.

    All snippets are kept in an in-memory index keyed by id. ``load_all``
    rebuilds the index from disk; ``save`` and ``delete`` update both the
    files and the index. Callers always receive copies.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self._snippets: Dict[str, Snippet] = {}
        self._paths: Dict[str, Path] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # public API
    def load_all(self) -> None:
        """Reload every ``*.md`` file below the data directory."""

        self.data_dir.mkdir(parents=True, exist_ok=True)
        with self._lock:
            self._snippets = {}
            self._paths = {}
            for path in sorted(self.data_dir.rglob("*")):
                if not path.is_file() or path.suffix.lower() != ".md":
                    continue
                try:
                    snippet = parse_frontmatter(path.read_text(encoding="utf-8"))
                    validate_snippet(snippet)
                except (OSError, UnicodeDecodeError) as exc:
                    logger.warning("Failed to read snippet file %s: %s", path, exc)
                    continue
                except FrontmatterError as exc:
                    logger.warning("Failed to parse snippet file %s: %s", path, exc)
                    continue
                except ValidationError as exc:
                    logger.warning("Invalid snippet in file %s: %s", path, exc)
                    continue
                self._snippets[snippet.id] = snippet
                self._paths[snippet.id] = path
        logger.info("Loaded snippets", extra={"count": len(self._snippets)})

    def save(self, snippet: Snippet) -> Snippet:
        """Upsert ``snippet`` and return the stored copy.

        ``updated_at`` is refreshed on every save. When the title changed,
        the file written for the previous title is removed.
        """

        validate_snippet(snippet)
        stored = snippet.model_copy(deep=True)
        stored.updated_at = utc_timestamp()

        with self._lock:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            path = self.data_dir / self._filename(stored)
            owner = next((sid for sid, p in self._paths.items() if p == path), None)
            if owner is not None and owner != stored.id:
                path = path.with_name(f"{path.stem}_{stored.id[:8]}{path.suffix}")
            path.write_text(render_frontmatter(stored), encoding="utf-8")
            previous = self._paths.get(stored.id)
            if previous is not None and previous != path and previous.exists():
                previous.unlink()
            self._snippets[stored.id] = stored
            self._paths[stored.id] = path
        return stored.model_copy(deep=True)

    def delete(self, snippet_id: str) -> None:
        with self._lock:
            if snippet_id not in self._snippets:
                raise SnippetNotFound(snippet_id)
            path = self._paths.pop(snippet_id, None)
            if path is not None and path.exists():
                path.unlink()
            del self._snippets[snippet_id]

    def get(self, snippet_id: str) -> Snippet:
        with self._lock:
            snippet = self._snippets.get(snippet_id)
            if snippet is None:
                raise SnippetNotFound(snippet_id)
            return snippet.model_copy(deep=True)

    def list_all(self) -> List[Snippet]:
        """Return all snippets, most recently updated first."""

        with self._lock:
            items = [s.model_copy(deep=True) for s in self._snippets.values()]
        return sorted(items, key=_updated_key, reverse=True)

    def search(self, query: str) -> List[Snippet]:
        results: List[SearchResult] = search_snippets(self.list_all(), query)
        return [r.snippet for r in results]

    # ------------------------------------------------------------------
    # helpers
    @staticmethod
    def _filename(snippet: Snippet) -> str:
        title = _UNSAFE_CHARS.sub("_", snippet.title)
        stamp = parse_timestamp(snippet.updated_at).strftime("%Y%m%d_%H%M%S")
        return f"{title}_{stamp}.md"


def _updated_key(snippet: Snippet) -> datetime:
    try:
        return parse_timestamp(snippet.updated_at)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)


__all__ = ["SnippetStorage"]
