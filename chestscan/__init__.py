"""
chestscan - clinical finding correlation for chest X-ray classifier output.
"""
from chestscan.core.correlation import (
    CorrelationConfig,
    Finding,
    FindingCorrelationEngine,
    FindingGroup,
    KnowledgeBase,
)
from chestscan.core.ingestion import parse_predictions

__version__ = "1.0.0"

__all__ = [
    "CorrelationConfig",
    "Finding",
    "FindingCorrelationEngine",
    "FindingGroup",
    "KnowledgeBase",
    "parse_predictions",
]
