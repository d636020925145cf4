"""Metrics sink interface and an in-memory recorder.

The service facade reports through any object with these three methods;
none of them may be required for the engine to work.
"""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

NO_MATCH_LABEL = "<no match>"


@runtime_checkable
class MetricsSink(Protocol):
    """Collaborator receiving engine metrics."""

    def record_response_time(self, duration_ms: float) -> None: ...

    def record_intent_match(self, tag: str | None) -> None: ...

    def record_error(self, kind: str, message: str) -> None: ...


@dataclass
class ServiceMetrics:
    """Thread-safe in-memory MetricsSink.

    Attributes:
        response_times_ms: Every recorded latency, in call order
        intent_matches: Count per intent tag (NO_MATCH_LABEL for misses)
        errors: Count per error kind
        last_error: Most recent (kind, message) pair
    """

    response_times_ms: list[float] = field(default_factory=list)
    intent_matches: Counter[str] = field(default_factory=Counter)
    errors: Counter[str] = field(default_factory=Counter)
    last_error: tuple[str, str] | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_response_time(self, duration_ms: float) -> None:
        with self._lock:
            self.response_times_ms.append(duration_ms)

    def record_intent_match(self, tag: str | None) -> None:
        with self._lock:
            self.intent_matches[tag if tag is not None else NO_MATCH_LABEL] += 1

    def record_error(self, kind: str, message: str) -> None:
        with self._lock:
            self.errors[kind] += 1
            self.last_error = (kind, message)

    @property
    def request_count(self) -> int:
        return len(self.response_times_ms)

    def summary(self) -> dict[str, Any]:
        """Aggregate view for display.

        Returns:
            Dict with request count, mean/max latency, match and error counts
        """
        with self._lock:
            times = list(self.response_times_ms)
            matches = dict(self.intent_matches)
            errors = dict(self.errors)
        return {
            "requests": len(times),
            "mean_ms": sum(times) / len(times) if times else 0.0,
            "max_ms": max(times) if times else 0.0,
            "matches": matches,
            "errors": errors,
        }


__all__ = ["MetricsSink", "NO_MATCH_LABEL", "ServiceMetrics"]
