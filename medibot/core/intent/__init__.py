"""Intent resolution engine for medibot.

Given free-text input and a fixed catalog of labeled patterns, the engine
ranks intents by textual similarity, applies an acceptance threshold and
returns the best-matching intent or None.

The pipeline has three pieces:
1. Catalog loading - validate the raw document once
2. Pattern scoring - edit-distance based word similarity, order and coverage
3. Resolution - best intent over the catalog, accepted at score >= 0.25

Example usage:
    ```python
    from medibot.core.intent import IntentResolver, load_catalog

    catalog = load_catalog({"intents": [...]})
    resolver = IntentResolver(catalog)

    intent = resolver.resolve("how to cure cuts?")
    if intent is not None:
        print(intent.tag)
    ```
"""

from .catalog import (
    BUNDLED_CATALOG_PATH,
    Catalog,
    Intent,
    bundled_catalog,
    load_catalog,
    load_catalog_file,
)
from .resolver import (
    IntentResolver,
    IntentScorer,
)
from .scorer import (
    MEDICAL_KEYWORDS,
    PatternScore,
    normalize,
    score_intent,
    score_pattern,
    tokenize,
)
from .similarity import (
    edit_distance,
    similarity,
)
from .taxonomy import (
    ErrorKind,
    MatchResult,
    MatchThresholds,
    ResponseResult,
)

__all__ = [
    # Catalog
    "BUNDLED_CATALOG_PATH",
    "Catalog",
    "Intent",
    "bundled_catalog",
    "load_catalog",
    "load_catalog_file",
    # Resolution
    "IntentResolver",
    "IntentScorer",
    # Scoring
    "MEDICAL_KEYWORDS",
    "PatternScore",
    "normalize",
    "score_intent",
    "score_pattern",
    "tokenize",
    "edit_distance",
    "similarity",
    # Taxonomy
    "ErrorKind",
    "MatchResult",
    "MatchThresholds",
    "ResponseResult",
]
