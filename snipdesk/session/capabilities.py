"""Injected user-interaction capabilities: confirmation and notices."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

from snipdesk.core.types import Confirm

logger = logging.getLogger(__name__)


async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def ask(confirm: Confirm, prompt: str) -> bool:
    return bool(await resolve(confirm(prompt)))


async def console_confirm(prompt: str) -> bool:
    """Ask on the terminal without blocking the event loop."""
    answer = await asyncio.to_thread(input, f"{prompt} [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def log_notify(message: str) -> None:
    logger.warning(message)


__all__ = ["resolve", "ask", "console_confirm", "log_notify"]
