"""Intent catalog loading and validation.

A catalog document looks like::

    {
      "intents": [
        {"tag": "Cuts",
         "patterns": ["What to do if Cuts?", "cuts treatment"],
         "responses": ["Clean the cut and apply pressure."],
         "context_set": ""}
      ]
    }

Validation is fail-fast: the first violation raises IntentLoadError. Individual
malformed patterns or responses inside an otherwise valid entry are dropped
with a warning instead of rejecting the whole catalog.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ChatbotError, IntentLoadError

logger = logging.getLogger(__name__)

BUNDLED_CATALOG_PATH = Path(__file__).resolve().parents[2] / "data" / "intents.json"

# Keys consumed by the loader; anything else on an entry lands in metadata
_KNOWN_KEYS = {"tag", "patterns", "responses", "context_set"}


@dataclass(frozen=True)
class Intent:
    """A labeled cluster of example phrasings and candidate replies.

    Attributes:
        tag: Intent label (unique by convention)
        patterns: Example phrasings compared against queries
        responses: Candidate reply texts
        context_set: Optional context tag (unused by matching)
        metadata: Any extra keys from the catalog entry
    """

    tag: str
    patterns: tuple[str, ...]
    responses: tuple[str, ...]
    context_set: str | None = None
    metadata: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, hash=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def valid_responses(self) -> list[str]:
        """Return the non-empty string responses."""
        return [r for r in self.responses if isinstance(r, str) and r.strip()]

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the catalog entry shape."""
        data: dict[str, Any] = {
            "tag": self.tag,
            "patterns": list(self.patterns),
            "responses": list(self.responses),
        }
        if self.context_set is not None:
            data["context_set"] = self.context_set
        data.update(self.metadata)
        return data


class Catalog:
    """Immutable, ordered collection of intents.

    Order matters only for tie-breaking: the first intent with the highest
    score wins.
    """

    __slots__ = ("_intents",)

    def __init__(self, intents: Iterable[Intent]) -> None:
        self._intents: tuple[Intent, ...] = tuple(intents)

    def __iter__(self) -> Iterator[Intent]:
        return iter(self._intents)

    def __len__(self) -> int:
        return len(self._intents)

    def __getitem__(self, index: int) -> Intent:
        return self._intents[index]

    def __repr__(self) -> str:
        return f"Catalog({len(self._intents)} intents)"

    @property
    def intents(self) -> tuple[Intent, ...]:
        return self._intents

    @property
    def tags(self) -> list[str]:
        return [intent.tag for intent in self._intents]

    def get(self, tag: str) -> Intent | None:
        """Return the first intent with the given tag, or None."""
        for intent in self._intents:
            if intent.tag == tag:
                return intent
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"intents": [intent.to_dict() for intent in self._intents]}


def load_catalog(raw: Any) -> Catalog:
    """Validate raw catalog data and build a Catalog.

    Args:
        raw: Parsed catalog document (a mapping with an ``intents`` list)

    Returns:
        Validated Catalog

    Raises:
        IntentLoadError: On the first structural violation found
    """
    try:
        if raw is None:
            raise IntentLoadError("Intent data is missing")

        entries = raw.get("intents") if isinstance(raw, Mapping) else None
        if entries is None or (not entries and isinstance(entries, (bool, int, float, str))):
            raise IntentLoadError("Invalid intent data structure: missing intents property")
        if not isinstance(entries, (list, tuple)):
            raise IntentLoadError("Invalid intent data structure: intents must be an array")
        if len(entries) == 0:
            raise IntentLoadError("Intent data is empty")

        intents = [_build_intent(entry) for entry in entries]
    except ChatbotError:
        raise
    except Exception as e:
        raise IntentLoadError(f"Failed to load intent data: {e}") from e

    seen: set[str] = set()
    for intent in intents:
        if intent.tag in seen:
            logger.warning(f"Duplicate intent tag in catalog: {intent.tag}")
        seen.add(intent.tag)

    logger.debug(f"Loaded catalog with {len(intents)} intents")
    return Catalog(intents)


def _build_intent(entry: Any) -> Intent:
    """Validate one catalog entry and convert it to an Intent."""
    if not isinstance(entry, Mapping):
        raise IntentLoadError("Invalid intent structure: missing required properties")

    tag = entry.get("tag")
    patterns = entry.get("patterns")
    responses = entry.get("responses")

    if not isinstance(tag, str) or not tag.strip() or not patterns or not responses:
        raise IntentLoadError("Invalid intent structure: missing required properties")
    if not isinstance(patterns, (list, tuple)) or not isinstance(responses, (list, tuple)):
        raise IntentLoadError(
            "Invalid intent structure: patterns and responses must be arrays"
        )

    valid_patterns = _keep_strings(tag, "pattern", patterns)
    valid_responses = _keep_strings(tag, "response", responses)
    if not valid_patterns:
        raise IntentLoadError(f"Invalid intent structure: intent '{tag}' has no valid patterns")
    if not valid_responses:
        raise IntentLoadError(f"Invalid intent structure: intent '{tag}' has no valid responses")

    context_set = entry.get("context_set")
    return Intent(
        tag=tag,
        patterns=tuple(valid_patterns),
        responses=tuple(valid_responses),
        context_set=context_set if isinstance(context_set, str) else None,
        metadata={k: v for k, v in entry.items() if k not in _KNOWN_KEYS},
    )


def _keep_strings(tag: str, kind: str, values: list[Any] | tuple[Any, ...]) -> list[str]:
    kept = [v for v in values if isinstance(v, str) and v.strip()]
    skipped = len(values) - len(kept)
    if skipped:
        logger.warning(f"Skipping {skipped} invalid {kind}(s) in intent: {tag}")
    return kept


def load_catalog_file(path: Path | str) -> Catalog:
    """Read and validate a catalog from a JSON or YAML file.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file

    Returns:
        Validated Catalog

    Raises:
        IntentLoadError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                raw = YAML(typ="safe").load(f)
            else:
                raw = json.load(f)
    except (OSError, ValueError, YAMLError) as e:
        raise IntentLoadError(f"Failed to load intent data: {e}") from e

    logger.info(f"Loading intent catalog from {path}")
    return load_catalog(raw)


def bundled_catalog() -> Catalog:
    """Load the sample first-aid catalog shipped with the package."""
    return load_catalog_file(BUNDLED_CATALOG_PATH)


__all__ = [
    "BUNDLED_CATALOG_PATH",
    "Catalog",
    "Intent",
    "bundled_catalog",
    "load_catalog",
    "load_catalog_file",
]
