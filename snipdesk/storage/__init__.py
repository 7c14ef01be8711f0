"""File-based snippet store."""

from .frontmatter import FrontmatterError, parse_frontmatter, render_frontmatter
from .search import SearchResult, fuzzy_score, search_snippets
from .snippet_storage import SnippetStorage

__all__ = [
    "SnippetStorage",
    "FrontmatterError",
    "parse_frontmatter",
    "render_frontmatter",
    "SearchResult",
    "fuzzy_score",
    "search_snippets",
]
