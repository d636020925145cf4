"""Chatbot service facade.

ChatbotService is the single entry point front ends talk to. It owns the
resolver (and through it the catalog), turns resolved intents into replies,
and converts every runtime failure into a well-formed ResponseResult.

Collaborators are injected and all optional:
- error_logger(context, error): receives load/match/generation failures
- metrics: any MetricsSink (record_response_time, record_intent_match,
  record_error)
- rng: randomness source with ``choice`` used to pick a reply
- history: ChatHistory used by chat() to persist the transcript
"""

from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import Any, Callable

from .errors import ChatbotError, ChatHistoryError, IntentMatchError, ResponseGenerationError
from .history import MAX_HISTORY_LENGTH, ChatHistory, ChatMessage
from .intent import (
    BUNDLED_CATALOG_PATH,
    Catalog,
    ErrorKind,
    Intent,
    IntentResolver,
    ResponseResult,
    load_catalog,
    load_catalog_file,
)
from .metrics import MetricsSink

logger = logging.getLogger(__name__)

ErrorLogger = Callable[[str, BaseException], None]


def log_error(context: str, error: BaseException) -> None:
    """Default error sink: forward to the module logger."""
    logger.error(f"{context} {error}")


class ChatbotService:
    """Intent-matching chatbot facade.

    Attributes:
        resolver: IntentResolver holding the active catalog
        error_logger: Sink for failure reports
        metrics: Optional metrics collaborator
        rng: Randomness source for reply selection
        history: Optional chat history collaborator
    """

    def __init__(
        self,
        intents_data: Any = None,
        *,
        catalog: Catalog | None = None,
        error_logger: ErrorLogger | None = None,
        metrics: MetricsSink | None = None,
        rng: random.Random | None = None,
        history: ChatHistory | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            intents_data: Raw catalog document to validate and install
            catalog: Already validated catalog (ignored if intents_data is given)
            error_logger: Failure sink, defaults to the module logger
            metrics: Optional metrics sink
            rng: Randomness source, defaults to a fresh random.Random
            history: Optional chat history store used by chat()

        Raises:
            IntentLoadError: If intents_data is invalid
        """
        self.error_logger: ErrorLogger = error_logger or log_error
        self.metrics = metrics
        self.rng = rng if rng is not None else random.Random()
        self.history = history
        self.resolver = IntentResolver(catalog)

        if intents_data is not None:
            self.load_intents(intents_data)

    @property
    def catalog(self) -> Catalog | None:
        return self.resolver.catalog

    @property
    def intents(self) -> tuple[Intent, ...]:
        catalog = self.resolver.catalog
        return catalog.intents if catalog is not None else ()

    # =========================================================================
    # Catalog loading
    # =========================================================================

    def load_intents(self, intents_data: Any) -> Catalog:
        """Validate raw intent data and make it the active catalog.

        Args:
            intents_data: Catalog document with an ``intents`` list

        Returns:
            The installed Catalog

        Raises:
            IntentLoadError: If the data is invalid; the old catalog stays active
        """
        return self._install(load_catalog, intents_data)

    def load_intents_file(self, path: Path | str) -> Catalog:
        """Read a JSON/YAML catalog file and make it the active catalog."""
        return self._install(load_catalog_file, path)

    def _install(self, loader: Callable[[Any], Catalog], source: Any) -> Catalog:
        try:
            catalog = loader(source)
        except ChatbotError as e:
            self._report("Error loading intents:", e)
            self._emit("record_error", "INTENT_LOAD_ERROR", str(e))
            raise
        self.resolver.replace_catalog(catalog)
        return catalog

    # =========================================================================
    # Matching and replies
    # =========================================================================

    def find_matching_intent(self, query: Any) -> Intent | None:
        """Resolve a query to an intent without producing a reply.

        Raises:
            IntentMatchError: If query is not a string or no catalog is loaded
        """
        try:
            return self.resolver.resolve(query)
        except ChatbotError as e:
            self._report("Error matching intent:", e)
            raise

    def generate_response(self, query: Any) -> ResponseResult:
        """Produce a reply for a query. Never raises.

        Args:
            query: User input; None or blank yields EMPTY_QUERY

        Returns:
            ResponseResult with answer, intent tag and error kind
        """
        start = time.perf_counter()
        try:
            if query is None or (isinstance(query, str) and not query.strip()):
                return ResponseResult.empty_query()
            if not isinstance(query, str):
                raise ResponseGenerationError("Query must be a string")

            intent = self.resolver.resolve(query)
            if intent is None:
                self._emit("record_intent_match", None)
                return ResponseResult.no_match()

            responses = intent.valid_responses()
            if not responses:
                raise ResponseGenerationError(f"No responses available for intent: {intent.tag}")

            answer = self.rng.choice(responses)
            self._emit("record_intent_match", intent.tag)
            return ResponseResult.matched(answer, intent.tag)

        except IntentMatchError as e:
            self._report("Error matching intent:", e)
            self._emit("record_error", ErrorKind.INTENT_MATCH_ERROR.value, str(e))
            return ResponseResult.failure(ErrorKind.INTENT_MATCH_ERROR)
        except Exception as e:
            self._report("Error generating response:", e)
            self._emit("record_error", ErrorKind.INTERNAL_ERROR.value, str(e))
            return ResponseResult.failure(ErrorKind.INTERNAL_ERROR)
        finally:
            self._emit("record_response_time", (time.perf_counter() - start) * 1000)

    # Same contract under the short name front ends use
    answer = generate_response

    def chat(self, query: Any) -> ResponseResult:
        """Generate a reply and record both sides in the chat history.

        History failures are logged and never change the reply.
        """
        result = self.generate_response(query)
        if self.history is None or not isinstance(query, str) or not query.strip():
            return result

        try:
            self.history.save_message(ChatMessage(text=query, sender="user"))
            self.history.save_message(
                ChatMessage(text=result.answer, sender="bot", intent=result.intent)
            )
        except ChatHistoryError as e:
            logger.warning(f"Chat history not updated: {e}")
        return result

    # =========================================================================
    # Collaborator plumbing
    # =========================================================================

    def _report(self, context: str, error: BaseException) -> None:
        try:
            self.error_logger(context, error)
        except Exception as e:
            logger.warning(f"Error logger failed: {e}")

    def _emit(self, method: str, *args: Any) -> None:
        if self.metrics is None:
            return
        try:
            getattr(self.metrics, method)(*args)
        except Exception as e:
            logger.warning(f"Metrics sink {method} failed: {e}")


def create_service(
    catalog_path: Path | None = None,
    history_path: Path | None = None,
    max_history: int = MAX_HISTORY_LENGTH,
    metrics: MetricsSink | None = None,
) -> ChatbotService:
    """Factory function to create a ChatbotService.

    Args:
        catalog_path: Catalog file; None loads the bundled sample catalog
        history_path: Chat history file; None disables history
        max_history: Maximum retained history messages
        metrics: Optional metrics sink

    Returns:
        Configured ChatbotService

    Raises:
        IntentLoadError: If the catalog cannot be loaded
    """
    service = ChatbotService(
        metrics=metrics,
        history=ChatHistory(history_path, max_history) if history_path else None,
    )
    service.load_intents_file(catalog_path or BUNDLED_CATALOG_PATH)
    return service


__all__ = ["ChatbotService", "ErrorLogger", "create_service", "log_error"]
