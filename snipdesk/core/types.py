"""Commonly used typing helpers."""

from __future__ import annotations

from typing import Awaitable, Callable, TypeAlias, Union

# Ask the user a yes/no question; may answer synchronously or later.
Confirm: TypeAlias = Callable[[str], Union[bool, Awaitable[bool]]]

# Show a notice to the user.
Notify: TypeAlias = Callable[[str], Union[None, Awaitable[None]]]

__all__ = ["Confirm", "Notify"]
