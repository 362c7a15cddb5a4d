"""
Group scoring.

Single finding:
    score = confidence * (1 + prevalence)

Multi-finding group (primary = diseases[0]):
    base    = mean(confidence) * mean(correlation of non-primary members)
    penalty = mean over non-primary of max(0, |Δconfidence| - 0.1 * (1 - corr))
    score   = base * (1 - penalty) * (1 + mean prevalence) * (1 + hierarchy bonus)

The expected confidence gap grows as correlation drops, so loosely related
members are allowed to disagree more before the group is penalised.
Non-primary members without a correlation (primaries of clusters absorbed
by the multi-level merge) count as correlation 0.
"""
from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .base import Finding, FindingGroup
from .knowledge_base import KnowledgeBase

# Confidence gap tolerated for a member with correlation 0
EXPECTED_DELTA_SCALE = 0.1
# Bonus when every non-primary member is hierarchically linked
HIERARCHY_BONUS_SCALE = 0.1


def _primary_line(primary: Finding) -> str:
    return f"Primary finding: {primary.name} ({primary.confidence * 100:.1f}% confidence)"


def score_group(cluster: Sequence[Finding], knowledge_base: KnowledgeBase) -> FindingGroup:
    """Score one cluster.  ``cluster`` must be non-empty."""
    diseases: List[Finding] = list(cluster)
    primary = diseases[0]
    explanation = [_primary_line(primary)]

    if len(diseases) == 1:
        prevalence = knowledge_base.prevalence_of(primary.name)
        explanation.append(f"Disease prevalence factor: {prevalence:.3f}")
        return FindingGroup(
            diseases=diseases,
            score=primary.confidence * (1 + prevalence),
            explanation=explanation,
        )

    members = diseases[1:]
    correlations = np.array([m.correlation or 0.0 for m in members], dtype=float)
    member_conf = np.array([m.confidence for m in members], dtype=float)

    avg_confidence = float(np.mean([d.confidence for d in diseases]))
    avg_correlation = float(np.mean(correlations))

    expected_delta = EXPECTED_DELTA_SCALE * (1 - correlations)
    unexpected_delta = np.maximum(0.0, np.abs(primary.confidence - member_conf) - expected_delta)
    confidence_delta_penalty = float(np.mean(unexpected_delta))

    prevalence_score = float(np.mean([knowledge_base.prevalence_of(d.name) for d in diseases]))

    hierarchical_count = sum(1 for d in diseases if d.is_child or d.parent_disease)
    hierarchy_bonus = (
        HIERARCHY_BONUS_SCALE * (hierarchical_count / len(members))
        if hierarchical_count > 0 else 0.0
    )

    base_score = avg_confidence * avg_correlation
    score = (
        base_score
        * (1 - confidence_delta_penalty)
        * (1 + prevalence_score)
        * (1 + hierarchy_bonus)
    )

    explanation.append(
        f"Group of {len(diseases)} related conditions with average correlation of "
        f"{avg_correlation:.2f}"
    )
    if confidence_delta_penalty > 0:
        explanation.append(
            f"Confidence inconsistency penalty: {confidence_delta_penalty * 100:.1f}%"
        )
    if prevalence_score > 0:
        explanation.append(f"Group prevalence factor: {prevalence_score:.3f}")
    if hierarchy_bonus > 0:
        explanation.append(f"Hierarchical relationship bonus: {hierarchy_bonus * 100:.1f}%")

    return FindingGroup(
        diseases=diseases,
        score=score,
        explanation=explanation,
        confidence_delta_penalty=confidence_delta_penalty,
        prevalence_score=prevalence_score,
        hierarchy_bonus=hierarchy_bonus,
    )
