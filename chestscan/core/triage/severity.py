"""
Scan triage from the highest-confidence finding.

Thresholds are module-level constants so they can be reviewed / tuned
without hunting through logic.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence

from chestscan.core.correlation.base import Finding

HIGH_SEVERITY_MIN   = 0.85
MEDIUM_SEVERITY_MIN = 0.50
# Below this the top finding is displayed as "Normal"
NORMAL_DISPLAY_MAX  = 0.25

NO_FINDING = "No Finding"


class Severity(str, Enum):
    HIGH   = "High"
    MEDIUM = "Medium"
    LOW    = "Low"


def severity_from_probability(probability: float) -> Severity:
    """Map a 0-1 probability to a severity label."""
    if probability >= HIGH_SEVERITY_MIN:
        return Severity.HIGH
    if probability >= MEDIUM_SEVERITY_MIN:
        return Severity.MEDIUM
    return Severity.LOW


def recommendation_for(condition: str, probability: float) -> str:
    """Plain-language next step for the patient."""
    if condition == NO_FINDING or probability < MEDIUM_SEVERITY_MIN:
        return (
            "No significant findings detected. Maintain regular health check-ups "
            "as recommended by your healthcare provider."
        )
    if probability >= HIGH_SEVERITY_MIN:
        return (
            f"High probability of {condition} detected. Immediate consultation with a "
            "specialist is strongly recommended for further evaluation and treatment planning."
        )
    return (
        f"Potential indicators of {condition} detected. Follow-up with a healthcare "
        "professional is recommended for further evaluation."
    )


def display_condition(condition: str, probability: float) -> str:
    """Condition label to show; weak top findings read as Normal."""
    return "Normal" if probability < NORMAL_DISPLAY_MAX else condition


@dataclass
class TriageAssessment:
    """Headline result for one scan."""
    condition: str
    probability: float
    severity: Severity
    recommendation: str

    @property
    def display_condition(self) -> str:
        return display_condition(self.condition, self.probability)

    @property
    def display_severity(self) -> Severity:
        if self.display_condition == "Normal":
            return Severity.LOW
        return self.severity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition,
            "display_condition": self.display_condition,
            "probability": round(self.probability * 100),
            "severity": self.severity.value,
            "display_severity": self.display_severity.value,
            "recommendation": self.recommendation,
        }


def assess(findings: Sequence[Finding]) -> TriageAssessment:
    """
    Triage a scan from its findings.

    Uses the highest-confidence finding (first one on ties); an empty list
    is reported as "No Finding" with probability 0.
    """
    if findings:
        top = max(findings, key=lambda f: f.confidence)
        condition, probability = top.name, top.confidence
    else:
        condition, probability = NO_FINDING, 0.0

    return TriageAssessment(
        condition=condition,
        probability=probability,
        severity=severity_from_probability(probability),
        recommendation=recommendation_for(condition, probability),
    )
