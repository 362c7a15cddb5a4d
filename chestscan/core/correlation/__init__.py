"""
Finding Correlation Layer

Groups related X-ray classifier findings and ranks the groups by clinical
relevance.

Usage:
    from chestscan.core.correlation import FindingCorrelationEngine, Finding

    engine = FindingCorrelationEngine()
    groups = engine.rank(findings, top_n=3)
"""
from .base import Finding, FindingGroup, Hierarchy, Relationship
from .config import CorrelationConfig
from .engine import FindingCorrelationEngine
from .knowledge_base import KnowledgeBase

__all__ = [
    "Finding",
    "FindingGroup",
    "Hierarchy",
    "Relationship",
    "CorrelationConfig",
    "FindingCorrelationEngine",
    "KnowledgeBase",
]
