"""Core library exposing domain models, settings, exceptions and types."""

from .settings import Settings, get_settings
from .exceptions import (
    DomainError,
    NotFoundError,
    ValidationError,
    StoreError,
    SnippetNotFound,
    LoadFailure,
    MutationFailure,
    NoActiveSnippet,
    Error,
)
from .models import Snippet, new_snippet, validate_snippet
from .languages import EditorMode, LanguageRegistry, PLAIN_TEXT, DEFAULT_REGISTRY
from .types import Confirm, Notify

__all__ = [
    "Settings",
    "get_settings",
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "StoreError",
    "SnippetNotFound",
    "LoadFailure",
    "MutationFailure",
    "NoActiveSnippet",
    "Error",
    "Snippet",
    "new_snippet",
    "validate_snippet",
    "EditorMode",
    "LanguageRegistry",
    "PLAIN_TEXT",
    "DEFAULT_REGISTRY",
    "Confirm",
    "Notify",
]
