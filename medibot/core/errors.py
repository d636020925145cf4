"""Exception taxonomy for the medibot engine.

All errors derive from ChatbotError so callers can catch the whole family:

- IntentLoadError: catalog structurally invalid (raised from load, never swallowed)
- IntentMatchError: resolution preconditions violated or resolution failed
- ResponseGenerationError: matched intent has no usable response
- ChatHistoryError: chat history could not be read or written
"""

from __future__ import annotations


class ChatbotError(Exception):
    """Base class for all medibot errors."""


class IntentLoadError(ChatbotError):
    """Raised when intent catalog data is missing or malformed."""


class IntentMatchError(ChatbotError):
    """Raised when a query cannot be matched against the catalog."""


class ResponseGenerationError(ChatbotError):
    """Raised when no reply can be produced for a matched intent."""


class ChatHistoryError(ChatbotError):
    """Raised when chat history persistence fails."""


__all__ = [
    "ChatbotError",
    "IntentLoadError",
    "IntentMatchError",
    "ResponseGenerationError",
    "ChatHistoryError",
]
