"""
Finding Correlation Layer - Base Types

Data contracts shared by the grouper, the scorer and the ranking engine.
Findings come in as (name, confidence) pairs from the X-ray classifier and
leave as members of scored, explainable groups.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Hierarchy(str, Enum):
    """
    Orientation-dependent hierarchical tag on a relationship entry.

    CHILD  – the queried-second finding is a clinical sub-type of the first
    PARENT – the queried-second finding is the parent type of the first
    NONE   – plain co-occurrence, no hierarchy
    """
    PARENT = "parent"
    CHILD  = "child"
    NONE   = "none"


@dataclass(frozen=True)
class Relationship:
    """One directed entry of the relationship table."""
    correlation: float                 # 0-1 co-occurrence strength
    hierarchical: Hierarchy = Hierarchy.NONE


@dataclass
class Finding:
    """
    One classifier output.

    ``correlation``, ``is_child`` and ``parent_disease`` are derived during
    grouping and only ever set on the copies placed into a cluster.
    """
    name: str
    confidence: float

    # ── Derived (grouping only) ───────────────────────────────────────────
    correlation: Optional[float] = None
    is_child: bool = False
    parent_disease: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "confidence": self.confidence,
        }
        if self.correlation is not None:
            data["correlation"] = self.correlation
            data["is_child"] = self.is_child
        if self.parent_disease is not None:
            data["parent_disease"] = self.parent_disease
        return data


@dataclass
class FindingGroup:
    """
    A ranked unit of output: one or more clinically related findings.

    ``diseases[0]`` is the primary finding.  The score sub-components are
    only set for multi-finding groups.
    """
    diseases: List[Finding]
    score: float
    explanation: List[str] = field(default_factory=list)

    confidence_delta_penalty: Optional[float] = None
    prevalence_score: Optional[float] = None
    hierarchy_bonus: Optional[float] = None

    @property
    def primary(self) -> Finding:
        return self.diseases[0]

    @property
    def is_multi(self) -> bool:
        return len(self.diseases) > 1

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "diseases": [d.to_dict() for d in self.diseases],
            "score": self.score,
            "explanation": list(self.explanation),
        }
        if self.is_multi:
            data["confidence_delta_penalty"] = self.confidence_delta_penalty
            data["prevalence_score"] = self.prevalence_score
            data["hierarchy_bonus"] = self.hierarchy_bonus
        return data
