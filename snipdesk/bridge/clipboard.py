"""Clipboard sinks used by the store bridges."""

from __future__ import annotations

import asyncio
import shlex
from abc import ABC, abstractmethod
from typing import List

from snipdesk.core.exceptions import StoreError


class ClipboardSink(ABC):
    @abstractmethod
    async def copy(self, text: str) -> None:
        """Place ``text`` on the clipboard."""


class MemoryClipboard(ClipboardSink):
    """Keeps copied text in memory; used headless and in tests."""

    def __init__(self) -> None:
        self.history: List[str] = []

    @property
    def text(self) -> str:
        return self.history[-1] if self.history else ""

    async def copy(self, text: str) -> None:
        self.history.append(text)


class CommandClipboard(ClipboardSink):
    """Pipes text to an OS clipboard command such as ``pbcopy``."""

    def __init__(self, command: str) -> None:
        self.argv = shlex.split(command)
        if not self.argv:
            raise ValueError("clipboard command is empty")

    async def copy(self, text: str) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise StoreError(f"clipboard command failed to start: {exc}") from exc
        _, stderr = await proc.communicate(text.encode("utf-8"))
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", "replace").strip()
            raise StoreError(f"clipboard command exited with {proc.returncode}: {detail}")


def clipboard_from_command(command: str) -> ClipboardSink:
    return CommandClipboard(command) if command.strip() else MemoryClipboard()


__all__ = ["ClipboardSink", "MemoryClipboard", "CommandClipboard", "clipboard_from_command"]
