"""Core components for medibot."""

from __future__ import annotations

from .errors import (
    ChatbotError,
    ChatHistoryError,
    IntentLoadError,
    IntentMatchError,
    ResponseGenerationError,
)
from .history import (
    MAX_HISTORY_LENGTH,
    ChatHistory,
    ChatMessage,
)
from .intent import (
    Catalog,
    ErrorKind,
    Intent,
    IntentResolver,
    MatchResult,
    ResponseResult,
    load_catalog,
    load_catalog_file,
)
from .metrics import (
    MetricsSink,
    ServiceMetrics,
)
from .service import (
    ChatbotService,
    create_service,
)

__all__ = [
    # Errors
    "ChatbotError",
    "ChatHistoryError",
    "IntentLoadError",
    "IntentMatchError",
    "ResponseGenerationError",
    # History
    "MAX_HISTORY_LENGTH",
    "ChatHistory",
    "ChatMessage",
    # Intent engine
    "Catalog",
    "ErrorKind",
    "Intent",
    "IntentResolver",
    "MatchResult",
    "ResponseResult",
    "load_catalog",
    "load_catalog_file",
    # Metrics
    "MetricsSink",
    "ServiceMetrics",
    # Service
    "ChatbotService",
    "create_service",
]
