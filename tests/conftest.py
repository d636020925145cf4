"""Shared fixtures for medibot tests."""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import MagicMock

import pytest

SAMPLE_INTENTS: dict[str, Any] = {
    "intents": [
        {
            "tag": "Cuts",
            "patterns": ["What to do if Cuts?", "How to cure Cuts?", "cuts treatment"],
            "responses": ["Clean the cut and apply pressure to stop bleeding."],
            "context_set": "",
        },
        {
            "tag": "Fever",
            "patterns": [
                "How do you treat a mild Fever?",
                "what to do if i get a mild fever?",
                "fever treatment",
            ],
            "responses": [
                "Take rest and drink plenty of fluids.",
                "Stay hydrated and monitor temperature.",
            ],
            "context_set": "",
        },
        {
            "tag": "Headache",
            "patterns": ["how to cure headache", "headache treatment", "head pain relief"],
            "responses": ["Take ibuprofen for pain relief"],
            "context_set": "",
        },
    ]
}


@pytest.fixture
def intents_data() -> dict[str, Any]:
    """Fresh copy of the three-intent sample catalog."""
    return copy.deepcopy(SAMPLE_INTENTS)


@pytest.fixture
def mock_metrics() -> MagicMock:
    """Metrics sink double with the three recording methods."""
    metrics = MagicMock()
    metrics.record_response_time = MagicMock()
    metrics.record_intent_match = MagicMock()
    metrics.record_error = MagicMock()
    return metrics
