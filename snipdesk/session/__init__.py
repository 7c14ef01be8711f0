"""Editing-session layer: draft, navigation guard, list query, controller."""

from .capabilities import ask, console_confirm, log_notify
from .controller import SessionController
from .draft import Draft, SessionEvent, compute_dirty
from .edit_session import EditSession
from .factory import build_bridge, build_controller
from .guard import GuardAction, GuardEvent, GuardState, NavigationGuard, transition
from .list_query import ListQuery, ListRow, ListState
from .messages import Messages

__all__ = [
    "SessionController",
    "build_bridge",
    "build_controller",
    "EditSession",
    "Draft",
    "SessionEvent",
    "compute_dirty",
    "NavigationGuard",
    "GuardState",
    "GuardEvent",
    "GuardAction",
    "transition",
    "ListQuery",
    "ListState",
    "ListRow",
    "Messages",
    "ask",
    "console_confirm",
    "log_notify",
]
