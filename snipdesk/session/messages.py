from __future__ import annotations

from snipdesk.core.i18n import I18n, get_i18n

# Used when the YAML catalogues are not shipped next to the package
MESSAGES = {
    "confirm_discard": "You have unsaved changes. Discard them and switch snippet?",
    "confirm_delete": "Are you sure you want to permanently delete this snippet?",
    "copied": "Copied to clipboard!",
    "failed_save": "Failed to save snippet: {error}",
    "failed_delete": "Failed to delete snippet: {error}",
    "failed_tag": "Failed to update tags: {error}",
    "failed_favorite": "Failed to update favorite: {error}",
    "failed_copy": "Failed to copy to clipboard: {error}",
    "failed_create": "Failed to create snippet: {error}",
    "failed_load": "Failed to load snippets: {error}",
    "failed_reload": "The change was stored, but the snippet list could not be refreshed: {error}",
}


class Messages:
    """Translate user-facing prompts and notices with a built-in fallback."""

    def __init__(self, lang: str = "en", i18n: I18n | None = None) -> None:
        self.i18n = i18n or get_i18n(lang)

    def __call__(self, key: str, **params: str) -> str:
        val = self.i18n.t(key, **params)
        if val != key:
            return val
        text = MESSAGES.get(key, key)
        return text.format(**params) if params else text


__all__ = ["Messages", "MESSAGES"]
