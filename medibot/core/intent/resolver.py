"""Intent resolution: pick the best-scoring intent for a query.

The resolver holds a reference to an immutable Catalog. Replacing the
catalog swaps that single reference, so a call already in progress keeps
reading the catalog it started with.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from ..errors import ChatbotError, IntentMatchError
from .catalog import Catalog, Intent
from .scorer import score_intent
from .taxonomy import MatchResult, MatchThresholds

logger = logging.getLogger(__name__)

IntentScorer = Callable[[str, Intent], float]


class IntentResolver:
    """Resolves free-text queries to catalog intents.

    Attributes:
        scorer: Function scoring a query against one intent
        threshold: Minimum score (inclusive) for a match to be accepted
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        scorer: IntentScorer = score_intent,
        threshold: float = MatchThresholds.ACCEPT,
    ) -> None:
        self._catalog = catalog
        self.scorer = scorer
        self.threshold = threshold

    @property
    def catalog(self) -> Catalog | None:
        return self._catalog

    def replace_catalog(self, catalog: Catalog) -> None:
        """Install a new catalog in one reference swap."""
        self._catalog = catalog
        logger.info(f"Resolver catalog replaced ({len(catalog)} intents)")

    def match(self, query: Any, catalog: Iterable[Intent] | None = None) -> MatchResult | None:
        """Find the best-scoring intent regardless of the threshold.

        Args:
            query: User query; must be a string or None
            catalog: Intents to search (defaults to the installed catalog)

        Returns:
            MatchResult for the top intent (first one wins ties), or None
            for blank input

        Raises:
            IntentMatchError: If query is not a string or no intents exist
        """
        try:
            if query is None:
                return None
            if not isinstance(query, str):
                raise IntentMatchError("Query must be a string")
            if not query.strip():
                return None

            intents = self._intents(catalog)
            best_intent: Intent | None = None
            best_score = 0.0
            for intent in intents:
                score = self.scorer(query, intent)
                if score > best_score:
                    best_intent = intent
                    best_score = score

            logger.debug(
                f"Best match for {query!r}: "
                f"{best_intent.tag if best_intent else None} ({best_score:.4f})"
            )
            return MatchResult(intent=best_intent, score=best_score)
        except ChatbotError:
            raise
        except Exception as e:
            raise IntentMatchError(f"Failed to match intent: {e}") from e

    def resolve(self, query: Any, catalog: Iterable[Intent] | None = None) -> Intent | None:
        """Return the matched intent if it clears the threshold.

        Args:
            query: User query; must be a string or None
            catalog: Intents to search (defaults to the installed catalog)

        Returns:
            The accepted Intent, or None for blank input or no match
        """
        result = self.match(query, catalog)
        if result is None or result.intent is None:
            return None
        return result.intent if result.score >= self.threshold else None

    def rank(self, query: Any, catalog: Iterable[Intent] | None = None) -> list[MatchResult]:
        """Score every intent and sort by descending score.

        Ties keep catalog order. Used for diagnostics.
        """
        if query is None:
            return []
        if not isinstance(query, str):
            raise IntentMatchError("Query must be a string")
        if not query.strip():
            return []
        results = [MatchResult(intent=i, score=self.scorer(query, i)) for i in self._intents(catalog)]
        return sorted(results, key=lambda r: r.score, reverse=True)

    def _intents(self, catalog: Iterable[Intent] | None) -> tuple[Intent, ...]:
        source = catalog if catalog is not None else self._catalog
        intents = tuple(source) if source is not None else ()
        if not intents:
            raise IntentMatchError("No intents available for matching")
        return intents


__all__ = ["IntentResolver", "IntentScorer"]
