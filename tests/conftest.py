"""
Pytest Configuration and Fixtures

Shared fixtures for the finding correlation tests.
"""
import pytest
from pathlib import Path
import sys

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chestscan.core.correlation import (
    CorrelationConfig,
    Finding,
    FindingCorrelationEngine,
    KnowledgeBase,
)


@pytest.fixture
def default_kb() -> KnowledgeBase:
    """Compiled-in ChestX-ray14 tables."""
    return KnowledgeBase.default()


@pytest.fixture
def synthetic_kb() -> KnowledgeBase:
    """
    Small synthetic tables for threshold and merge tests.

    X-Y and Y-Z relate at 0.70 (below the strong override), X-Z is
    unrelated.  P-C is a parent/child pair at 0.90.  B-L / B-S sit exactly
    on the correlation and strong-override boundaries.
    """
    return KnowledgeBase.from_dict({
        "prevalence": {"X": 0.10, "Y": 0.20, "P": 0.05, "C": 0.15},
        "relationships": {
            "X": {"Y": {"correlation": 0.70}},
            "Z": {"Y": {"correlation": 0.70}},
            "P": {"C": {"correlation": 0.90, "hierarchical": "child"}},
            "C": {"P": {"correlation": 0.90, "hierarchical": "parent"}},
            "B": {
                "L": {"correlation": 0.65},
                "S": {"correlation": 0.75},
            },
        },
    }, source="synthetic")


@pytest.fixture
def config() -> CorrelationConfig:
    return CorrelationConfig()


@pytest.fixture
def engine(default_kb) -> FindingCorrelationEngine:
    return FindingCorrelationEngine(knowledge_base=default_kb)


@pytest.fixture
def synthetic_engine(synthetic_kb) -> FindingCorrelationEngine:
    return FindingCorrelationEngine(knowledge_base=synthetic_kb)


@pytest.fixture
def unrelated_findings():
    """Five findings with no relationship entries between any pair."""
    return [
        Finding("Hernia", 0.40),
        Finding("Emphysema", 0.55),
        Finding("Fibrosis", 0.30),
        Finding("Pleural Thickening", 0.70),
        Finding("Pneumothorax", 0.20),
    ]
