"""Store bridge abstractions and implementations."""

from .base import StoreBridge
from .clipboard import ClipboardSink, CommandClipboard, MemoryClipboard, clipboard_from_command
from .http_bridge import HttpStoreBridge
from .local_bridge import LocalStoreBridge

__all__ = [
    "StoreBridge",
    "LocalStoreBridge",
    "HttpStoreBridge",
    "ClipboardSink",
    "MemoryClipboard",
    "CommandClipboard",
    "clipboard_from_command",
]
