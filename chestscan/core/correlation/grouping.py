"""
Finding grouping: first-level clustering and multi-level merge.

Design principles:
  - Greedy, anchored on the highest-confidence unassigned finding, which
    mirrors the clinical reading order ("explain away from the most
    confident observation").
  - Both passes are pure: inputs are never mutated; merged members are
    annotated copies.
  - The multi-level merge is a single forward pass.  A cluster absorbed
    into C is not rescanned for further merges, so chains X-Y-Z where only
    Y relates to Z are not fully joined.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from .base import Finding, Hierarchy
from .config import CorrelationConfig, at_least, at_most
from .knowledge_base import KnowledgeBase

Cluster = List[Finding]


def group_findings(
    findings: Sequence[Finding],
    knowledge_base: KnowledgeBase,
    config: CorrelationConfig,
) -> List[Cluster]:
    """
    First-level clustering.

    Returns a partition of ``findings``: every finding appears in exactly one
    cluster, the primary (highest confidence) first.  Ties in confidence keep
    input order.
    """
    ordered = sorted(findings, key=lambda f: -f.confidence)
    assigned = [False] * len(ordered)
    clusters: List[Cluster] = []

    for i, primary in enumerate(ordered):
        if assigned[i]:
            continue
        assigned[i] = True
        cluster: Cluster = [replace(primary)]

        for j, other in enumerate(ordered):
            if assigned[j]:
                continue

            relationship = knowledge_base.resolve(primary.name, other.name)
            if relationship is None:
                continue

            corr = relationship.correlation
            diff = abs(primary.confidence - other.confidence)

            similar = (
                at_most(diff, config.similarity_threshold)
                and at_least(corr, config.correlation_threshold)
            )
            if not (similar or at_least(corr, config.strong_relation_override)):
                continue

            is_child = relationship.hierarchical is Hierarchy.CHILD
            cluster.append(replace(
                other,
                correlation=corr,
                is_child=is_child,
                parent_disease=primary.name if is_child else None,
            ))
            assigned[j] = True

        clusters.append(cluster)

    return clusters


def _clusters_related(
    a: Cluster,
    b: Cluster,
    knowledge_base: KnowledgeBase,
    config: CorrelationConfig,
) -> bool:
    for left in a:
        for right in b:
            relationship = knowledge_base.resolve(left.name, right.name)
            if relationship is not None and at_least(
                relationship.correlation, config.correlation_threshold
            ):
                return True
    return False


def merge_clusters(
    clusters: Sequence[Cluster],
    knowledge_base: KnowledgeBase,
    config: CorrelationConfig,
) -> List[Cluster]:
    """
    Multi-level merge of first-level clusters.

    For each unmerged cluster C, every other unmerged cluster D with at least
    one member pair related at ``correlation_threshold`` or above is appended
    to C.  Relatedness is tested against C's own first-level members only.
    """
    merged = [False] * len(clusters)
    result: List[Cluster] = []

    for idx, cluster in enumerate(clusters):
        if merged[idx]:
            continue
        merged[idx] = True
        combined: Cluster = list(cluster)

        for other_idx, other in enumerate(clusters):
            if merged[other_idx]:
                continue
            if _clusters_related(cluster, other, knowledge_base, config):
                combined.extend(other)
                merged[other_idx] = True

        result.append(combined)

    return result
