from __future__ import annotations

from snipdesk.bridge import HttpStoreBridge, LocalStoreBridge, StoreBridge, clipboard_from_command
from snipdesk.core.languages import DEFAULT_REGISTRY
from snipdesk.core.settings import Settings, get_settings
from snipdesk.core.types import Confirm, Notify
from snipdesk.storage import SnippetStorage

from .capabilities import console_confirm
from .controller import SessionController
from .messages import Messages


def build_bridge(settings: Settings | None = None) -> StoreBridge:
    """Create the store bridge selected by ``settings.store_backend``."""
    settings = settings or get_settings()
    clipboard = clipboard_from_command(settings.clipboard_command)
    backend = settings.store_backend.strip().lower()
    if backend == "http":
        return HttpStoreBridge(
            settings.api_url,
            api_token=settings.api_token,
            timeout=settings.http_timeout,
            clipboard=clipboard,
        )
    if backend != "local":
        raise ValueError(f"unknown store backend: {settings.store_backend}")
    storage = SnippetStorage(settings.data_dir)
    storage.load_all()
    return LocalStoreBridge(storage, clipboard=clipboard)


def build_controller(
    settings: Settings | None = None,
    *,
    bridge: StoreBridge | None = None,
    confirm: Confirm = console_confirm,
    notify: Notify | None = None,
) -> SessionController:
    """Assemble a controller from settings: bridge, clipboard and language."""
    settings = settings or get_settings()
    return SessionController(
        bridge or build_bridge(settings),
        confirm,
        notify,
        messages=Messages(settings.lang),
        registry=DEFAULT_REGISTRY,
    )


__all__ = ["build_bridge", "build_controller"]
