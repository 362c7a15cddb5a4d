"""
Domain Knowledge Base

Static prevalence and relationship tables for the 14 ChestX-ray14 labels,
plus the bidirectional relationship lookup used by the grouper and merger.

Tables are read-only after construction, so one KnowledgeBase can be shared
by every engine instance and request.  Alternative tables (synthetic ones in
tests, curated ones in deployment) are loaded with from_dict() / from_json().

Relationship storage is asymmetric on purpose: the hierarchical tag is only
meaningful relative to the finding queried first, so resolve() tries (A, B)
and then (B, A) and returns the stored entry unchanged.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from chestscan.utils import KnowledgeBaseError, get_logger
from .base import Hierarchy, Relationship

logger = get_logger(__name__)

# ── Base rates in the NIH ChestX-ray14 training population ───────────────────
DEFAULT_PREVALENCE: Dict[str, float] = {
    "Atelectasis":        0.103,
    "Cardiomegaly":       0.025,
    "Consolidation":      0.042,
    "Edema":              0.021,
    "Effusion":           0.119,
    "Emphysema":          0.022,
    "Fibrosis":           0.015,
    "Hernia":             0.002,
    "Infiltration":       0.177,
    "Mass":               0.052,
    "Nodule":             0.056,
    "Pleural Thickening": 0.030,
    "Pneumonia":          0.013,
    "Pneumothorax":       0.047,
}

# ── Pairwise co-occurrence (raw form, same shape as from_dict input) ─────────
DEFAULT_RELATIONSHIPS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "Pneumonia": {
        "Infiltration":  {"correlation": 0.85, "hierarchical": "child"},
        "Consolidation": {"correlation": 0.78},
        "Effusion":      {"correlation": 0.65},
    },
    "Atelectasis": {
        "Mass":         {"correlation": 0.60},
        "Nodule":       {"correlation": 0.55},
        "Pneumothorax": {"correlation": 0.70},
    },
    "Cardiomegaly": {
        "Edema":    {"correlation": 0.75},
        "Effusion": {"correlation": 0.68},
    },
    "Effusion": {
        "Pneumonia":    {"correlation": 0.65},
        "Cardiomegaly": {"correlation": 0.68},
        "Edema":        {"correlation": 0.73},
    },
    "Edema": {
        "Effusion":     {"correlation": 0.73},
        "Cardiomegaly": {"correlation": 0.75},
    },
    "Mass": {
        "Nodule":      {"correlation": 0.82, "hierarchical": "parent"},
        "Atelectasis": {"correlation": 0.60},
    },
    "Nodule": {
        "Mass":        {"correlation": 0.82, "hierarchical": "child"},
        "Atelectasis": {"correlation": 0.55},
    },
    "Infiltration": {
        "Pneumonia":   {"correlation": 0.85, "hierarchical": "parent"},
        "Atelectasis": {"correlation": 0.50},
    },
    "Consolidation": {
        "Pneumonia":    {"correlation": 0.78},
        "Infiltration": {"correlation": 0.70},
    },
    "Pneumothorax": {
        "Atelectasis": {"correlation": 0.70},
    },
}


def _parse_rate(value: Any, where: str, source: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise KnowledgeBaseError(
            f"{where}: expected a number, got {type(value).__name__}",
            source=source,
        )
    rate = float(value)
    if not 0.0 <= rate <= 1.0:
        raise KnowledgeBaseError(
            f"{where}: {rate} is outside [0, 1]",
            source=source,
            details={"value": rate},
        )
    return rate


def _parse_relationship(raw: Any, where: str, source: str) -> Relationship:
    if isinstance(raw, Relationship):
        return raw
    if not isinstance(raw, Mapping) or "correlation" not in raw:
        raise KnowledgeBaseError(
            f"{where}: relationship entry must be a mapping with 'correlation'",
            source=source,
        )
    tag = raw.get("hierarchical") or Hierarchy.NONE.value
    try:
        hierarchical = Hierarchy(tag)
    except ValueError:
        raise KnowledgeBaseError(
            f"{where}: unknown hierarchical tag {tag!r}",
            source=source,
            details={"allowed": [h.value for h in Hierarchy]},
        ) from None
    return Relationship(
        correlation=_parse_rate(raw["correlation"], where, source),
        hierarchical=hierarchical,
    )


class KnowledgeBase:
    """
    Prevalence + relationship tables with the lookups the engine needs.

    Construct directly from already-typed tables, or use default(),
    from_dict() and from_json() for raw data.
    """

    def __init__(
        self,
        prevalence: Mapping[str, float],
        relationships: Mapping[str, Mapping[str, Relationship]],
    ):
        self._prevalence: Dict[str, float] = dict(prevalence)
        self._relationships: Dict[str, Dict[str, Relationship]] = {
            a: dict(row) for a, row in relationships.items()
        }

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def default(cls) -> "KnowledgeBase":
        """Compiled-in ChestX-ray14 tables."""
        return cls.from_dict(
            {"prevalence": DEFAULT_PREVALENCE, "relationships": DEFAULT_RELATIONSHIPS},
            source="default",
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "dict") -> "KnowledgeBase":
        """
        Build from raw tables::

            {
                "prevalence": {"Hernia": 0.002, ...},
                "relationships": {
                    "Pneumonia": {"Infiltration": {"correlation": 0.85,
                                                   "hierarchical": "child"}}
                }
            }

        Both keys are optional.  Raises KnowledgeBaseError on malformed
        entries (non-numeric or out-of-range rates, unknown tags).
        """
        if not isinstance(data, Mapping):
            raise KnowledgeBaseError("knowledge base must be a mapping", source=source)

        raw_prevalence = data.get("prevalence") or {}
        raw_relationships = data.get("relationships") or {}
        if not isinstance(raw_prevalence, Mapping) or not isinstance(raw_relationships, Mapping):
            raise KnowledgeBaseError(
                "'prevalence' and 'relationships' must be mappings", source=source
            )

        prevalence = {
            name: _parse_rate(rate, f"prevalence[{name!r}]", source)
            for name, rate in raw_prevalence.items()
        }

        relationships: Dict[str, Dict[str, Relationship]] = {}
        for a, row in raw_relationships.items():
            if not isinstance(row, Mapping):
                raise KnowledgeBaseError(
                    f"relationships[{a!r}] must be a mapping", source=source
                )
            relationships[a] = {
                b: _parse_relationship(entry, f"relationships[{a!r}][{b!r}]", source)
                for b, entry in row.items()
            }

        kb = cls(prevalence, relationships)
        logger.info(
            f"KnowledgeBase loaded from {source}: "
            f"{len(prevalence)} prevalence rates, {kb.relationship_count} relationships"
        )
        return kb

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "KnowledgeBase":
        """Load tables from a JSON file in the from_dict() layout."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise KnowledgeBaseError(
                f"cannot read knowledge base file: {exc}", source=str(path)
            ) from exc
        except json.JSONDecodeError as exc:
            raise KnowledgeBaseError(
                f"invalid JSON at line {exc.lineno}: {exc.msg}", source=str(path)
            ) from exc
        return cls.from_dict(data, source=str(path))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def prevalence_of(self, name: str) -> float:
        """Base rate of a finding type; 0 for unknown types."""
        return self._prevalence.get(name, 0.0)

    def resolve(self, type_a: str, type_b: str) -> Optional[Relationship]:
        """
        Relationship between two finding types, or None if unrelated.

        Checks the (A, B) entry first and falls back to (B, A).  The entry is
        returned as stored: its hierarchical tag is never flipped.
        """
        found = self._relationships.get(type_a, {}).get(type_b)
        if found is None:
            found = self._relationships.get(type_b, {}).get(type_a)
        return found

    @property
    def relationship_count(self) -> int:
        return sum(len(row) for row in self._relationships.values())

    @property
    def finding_types(self) -> set:
        """Every finding type mentioned in either table."""
        names = set(self._prevalence)
        for a, row in self._relationships.items():
            names.add(a)
            names.update(row)
        return names

    def to_dict(self) -> Dict[str, Any]:
        """Raw form, accepted back by from_dict()."""
        relationships: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for a, row in self._relationships.items():
            relationships[a] = {}
            for b, rel in row.items():
                entry: Dict[str, Any] = {"correlation": rel.correlation}
                if rel.hierarchical is not Hierarchy.NONE:
                    entry["hierarchical"] = rel.hierarchical.value
                relationships[a][b] = entry
        return {"prevalence": dict(self._prevalence), "relationships": relationships}
