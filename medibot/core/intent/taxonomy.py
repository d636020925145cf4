"""Result types, error kinds and scoring thresholds for medibot.

This module defines the values that cross the engine boundary and the
empirically tuned constants used by the pattern scorer and resolver.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .catalog import Intent


class ErrorKind(str, Enum):
    """Error tags carried in the ``error`` field of a ResponseResult."""

    EMPTY_QUERY = "EMPTY_QUERY"  # Blank or missing query
    NO_MATCH = "NO_MATCH"  # Best score below acceptance threshold
    INTENT_MATCH_ERROR = "INTENT_MATCH_ERROR"  # Resolver failed
    INTERNAL_ERROR = "INTERNAL_ERROR"  # Anything else


class MatchThresholds:
    """Scoring constants for intent matching.

    The weights and normalizer are tuned by hand and must stay exactly as
    they are: tie-breaks and threshold behavior depend on them.
    """

    WORD_MATCH = 0.6  # Word similarity must exceed this to count as matched
    KEYWORD_BONUS = 0.2  # Per matched word pair touching a medical keyword
    ACCEPT = 0.25  # Minimum intent score (inclusive)

    EXACT_WEIGHT = 1.0
    WORD_SIMILARITY_WEIGHT = 0.7
    WORD_ORDER_WEIGHT = 0.6
    COVERAGE_WEIGHT = 0.9
    NORMALIZER = 3.2


EMPTY_QUERY_ANSWER = "I'm sorry, I don't understand empty queries. Please ask a medical question."
NO_MATCH_ANSWER = (
    "I'm sorry, I don't understand that medical query. Could you please rephrase it "
    "or ask about a specific medical condition?"
)
INTENT_MATCH_ERROR_ANSWER = (
    "Sorry, there was an error matching your query. Please try rephrasing your question."
)
INTERNAL_ERROR_ANSWER = "Sorry, I encountered an error processing your query. Please try again."


@dataclass(frozen=True)
class MatchResult:
    """Outcome of scoring a query against the catalog.

    Attributes:
        intent: The chosen intent (owned by the catalog), or None
        score: Normalized score in [0, 1]
    """

    intent: Intent | None
    score: float

    @property
    def tag(self) -> str | None:
        """Tag of the chosen intent, if any."""
        return self.intent.tag if self.intent is not None else None

    def is_accepted(self) -> bool:
        """Check if the score meets the acceptance threshold."""
        return self.intent is not None and self.score >= MatchThresholds.ACCEPT


@dataclass(frozen=True)
class ResponseResult:
    """Reply produced by the service facade.

    This is the only value returned across the engine boundary. All fields
    are plain strings copied out of the catalog.

    Attributes:
        answer: Human-readable reply text
        intent: Tag of the resolved intent, or None
        error: Error kind, or None on success
    """

    answer: str
    intent: str | None = None
    error: ErrorKind | None = None

    @classmethod
    def matched(cls, answer: str, tag: str) -> "ResponseResult":
        """Create a successful result for a resolved intent."""
        return cls(answer=answer, intent=tag, error=None)

    @classmethod
    def empty_query(cls) -> "ResponseResult":
        """Create the result returned for blank or missing input."""
        return cls(answer=EMPTY_QUERY_ANSWER, error=ErrorKind.EMPTY_QUERY)

    @classmethod
    def no_match(cls) -> "ResponseResult":
        """Create the fallback result when no intent is accepted."""
        return cls(answer=NO_MATCH_ANSWER, error=ErrorKind.NO_MATCH)

    @classmethod
    def failure(cls, kind: ErrorKind) -> "ResponseResult":
        """Create a user-safe result for an internal failure.

        Args:
            kind: INTENT_MATCH_ERROR or INTERNAL_ERROR

        Returns:
            ResponseResult with the fixed apology for that kind
        """
        if kind is ErrorKind.INTENT_MATCH_ERROR:
            return cls(answer=INTENT_MATCH_ERROR_ANSWER, error=kind)
        return cls(answer=INTERNAL_ERROR_ANSWER, error=ErrorKind.INTERNAL_ERROR)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{answer, intent, error}`` front-end contract."""
        return {
            "answer": self.answer,
            "intent": self.intent,
            "error": self.error.value if self.error is not None else None,
        }
