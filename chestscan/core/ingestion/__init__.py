"""
Ingestion Layer

Turns raw classifier payloads into Finding objects.
"""
from .predictions import PredictionRecord, is_valid_predictions, parse_predictions

__all__ = [
    "PredictionRecord",
    "is_valid_predictions",
    "parse_predictions",
]
