"""
Triage Layer

Severity label and plain-language recommendation for the top finding of a
scan, shown next to the ranked groups.
"""
from .severity import (
    Severity,
    TriageAssessment,
    assess,
    display_condition,
    recommendation_for,
    severity_from_probability,
)

__all__ = [
    "Severity",
    "TriageAssessment",
    "assess",
    "display_condition",
    "recommendation_for",
    "severity_from_probability",
]
