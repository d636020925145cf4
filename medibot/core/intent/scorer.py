"""Pattern scoring for medibot intent matching.

A query is compared with one catalog pattern using four signals:

1. Exact match - normalized strings are identical
2. Word similarity - mean over query words of their best similarity
3. Word order - matched words found at similar relative positions, plus a
   bonus for medical keywords
4. Coverage - matched words over the longer word sequence

The weighted sum is divided by a fixed normalizer (see MatchThresholds).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .similarity import similarity
from .taxonomy import MatchThresholds

if TYPE_CHECKING:
    from .catalog import Intent

logger = logging.getLogger(__name__)

# Clinical terms that earn the word-order bonus when part of a matched pair
MEDICAL_KEYWORDS: tuple[str, ...] = ("cuts", "fever", "headache", "pain", "treatment", "cure")


def normalize(text: str) -> str:
    """Lower-case and trim text for comparison."""
    return text.lower().strip()


def tokenize(text: str) -> list[str]:
    """Normalize text and split it into whitespace-delimited words."""
    return normalize(text).split()


@dataclass(frozen=True)
class PatternScore:
    """Component scores for one (query, pattern) comparison.

    Attributes:
        pattern: The pattern text as given
        exact_match: 1.0 when normalized strings are identical, else 0.0
        word_similarity: Mean best-word similarity over query words
        word_order: Positional agreement of matched words (with keyword bonus)
        coverage: Matched words over the longer word count
        matched_words: Number of query words whose best similarity passed
    """

    pattern: str
    exact_match: float
    word_similarity: float
    word_order: float
    coverage: float
    matched_words: int

    @property
    def score(self) -> float:
        """Weighted, normalized combination of the components."""
        return (
            self.exact_match * MatchThresholds.EXACT_WEIGHT
            + self.word_similarity * MatchThresholds.WORD_SIMILARITY_WEIGHT
            + self.word_order * MatchThresholds.WORD_ORDER_WEIGHT
            + self.coverage * MatchThresholds.COVERAGE_WEIGHT
        ) / MatchThresholds.NORMALIZER


def score_pattern(query: str, pattern: str) -> PatternScore:
    """Score a query against a single pattern.

    Args:
        query: User query (raw or normalized)
        pattern: Catalog pattern (raw or normalized)

    Returns:
        PatternScore with every component filled in
    """
    normalized_query = normalize(query)
    normalized_pattern = normalize(pattern)
    query_words = tokenize(query)
    pattern_words = tokenize(pattern)

    exact = 1.0 if normalized_query == normalized_pattern else 0.0
    longest = max(len(query_words), len(pattern_words))

    similarity_total = 0.0
    order_total = 0.0
    matched = 0
    keyword_hits = 0

    for i, query_word in enumerate(query_words):
        best = 0.0
        best_index = -1
        for j, pattern_word in enumerate(pattern_words):
            sim = similarity(query_word, pattern_word)
            if sim > best:
                best = sim
                best_index = j
        similarity_total += best

        if best > MatchThresholds.WORD_MATCH:
            matched += 1
            order_total += 1 - abs(i - best_index) / longest
            partner = pattern_words[best_index]
            if any(k in query_word or k in partner for k in MEDICAL_KEYWORDS):
                keyword_hits += 1

    if query_words:
        word_similarity = similarity_total / len(query_words)
        coverage = matched / longest
    else:
        word_similarity = 0.0
        coverage = 0.0

    base_order = order_total / matched if matched > 0 else 0.0
    word_order = min(1.0, base_order + keyword_hits * MatchThresholds.KEYWORD_BONUS)

    return PatternScore(
        pattern=pattern,
        exact_match=exact,
        word_similarity=word_similarity,
        word_order=word_order,
        coverage=coverage,
        matched_words=matched,
    )


def score_intent(query: str, intent: Intent) -> float:
    """Score an intent as the best score over its valid patterns.

    Non-string or blank patterns are skipped with a warning.

    Args:
        query: User query
        intent: Catalog intent

    Returns:
        Highest pattern score, or 0.0 when no pattern is usable
    """
    best = 0.0
    for pattern in intent.patterns:
        if not isinstance(pattern, str) or not pattern.strip():
            logger.warning(f"Skipping invalid pattern in intent: {intent.tag}")
            continue

        result = score_pattern(query, pattern)
        logger.debug(
            f"Pattern {pattern!r} scored {result.score:.4f} "
            f"(exact={result.exact_match}, words={result.word_similarity:.3f}, "
            f"order={result.word_order:.3f}, coverage={result.coverage:.3f})"
        )
        best = max(best, result.score)
    return best


__all__ = [
    "MEDICAL_KEYWORDS",
    "PatternScore",
    "normalize",
    "score_intent",
    "score_pattern",
    "tokenize",
]
