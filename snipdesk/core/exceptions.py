"""Base exceptions for the domain layer."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all domain level exceptions."""


class NotFoundError(DomainError):
    """Raised when an entity cannot be located."""


class ValidationError(DomainError):
    """Raised when data fails domain validation rules."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"invalid snippet: {field}: {reason}")
        self.field = field
        self.reason = reason


class StoreError(DomainError):
    """Raised by a store bridge when a store call fails."""


class SnippetNotFound(StoreError, NotFoundError):
    """Raised when the store has no snippet with the requested id."""

    def __init__(self, snippet_id: str) -> None:
        super().__init__(f"snippet with ID {snippet_id} not found")
        self.snippet_id = snippet_id


class LoadFailure(DomainError):
    """A list or single-item fetch failed."""


class MutationFailure(DomainError):
    """A save, delete, tag, favorite or copy call failed."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.message = message


class NoActiveSnippet(DomainError):
    """Raised when an operation needs a draft but nothing is selected."""


# Alias to keep a generic name for error type hints
Error = DomainError

__all__ = [
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "StoreError",
    "SnippetNotFound",
    "LoadFailure",
    "MutationFailure",
    "NoActiveSnippet",
    "Error",
]
