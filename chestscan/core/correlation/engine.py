"""
Finding Correlation Engine

Ranking facade over the grouping and scoring passes.  Takes the flat list of
classifier findings for one scan and returns the top-N clinically coherent
groups, each with a score and an explanation trail.

Usage:
    from chestscan.core.correlation import FindingCorrelationEngine, Finding

    engine = FindingCorrelationEngine()
    groups = engine.rank([Finding("Pneumonia", 0.80), Finding("Infiltration", 0.78)])
    for g in groups:
        print(g.score, [d.name for d in g.diseases], g.explanation)

Pipeline:
    findings → group_findings → merge_clusters → score_group → sort → top N
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from chestscan.core.triage import assess
from chestscan.utils import get_logger
from .base import Finding, FindingGroup
from .config import CorrelationConfig
from .grouping import group_findings, merge_clusters
from .knowledge_base import KnowledgeBase
from .scoring import score_group

logger = get_logger(__name__)


class FindingCorrelationEngine:
    """
    Groups and ranks classifier findings.

    Stateless apart from the read-only knowledge base and thresholds, so one
    instance is safe to share across threads / concurrent requests.
    """

    def __init__(
        self,
        knowledge_base: Optional[KnowledgeBase] = None,
        config: Optional[CorrelationConfig] = None,
    ):
        self.knowledge_base = knowledge_base or KnowledgeBase.default()
        self.config = config or CorrelationConfig()

    def group(self, findings: Sequence[Finding]) -> List[List[Finding]]:
        """First-level clusters only.  Useful for inspecting the grouper."""
        return group_findings(findings, self.knowledge_base, self.config)

    def merge(self, clusters: Sequence[List[Finding]]) -> List[List[Finding]]:
        return merge_clusters(clusters, self.knowledge_base, self.config)

    def score(self, cluster: Sequence[Finding]) -> FindingGroup:
        return score_group(cluster, self.knowledge_base)

    def rank(
        self,
        findings: Sequence[Finding],
        top_n: Optional[int] = None,
    ) -> List[FindingGroup]:
        """
        Group, merge, score and rank findings.

        Args:
            findings: Classifier output for one scan (confidence as 0-1).
            top_n:    Max groups to return; defaults to config.top_n.

        Returns:
            Up to ``top_n`` FindingGroups by descending score.  Equal scores
            keep the order the clusters were produced in.  An empty input
            gives an empty list.
        """
        limit = self.config.top_n if top_n is None else top_n
        if not findings:
            return []

        clusters = self.group(findings)
        merged = self.merge(clusters)
        logger.debug(
            f"FindingCorrelationEngine: {len(findings)} finding(s) → "
            f"{len(clusters)} cluster(s) → {len(merged)} merged group(s)"
        )

        groups = [self.score(cluster) for cluster in merged]
        ranked = sorted(groups, key=lambda g: -g.score)[:limit]

        logger.debug(
            "FindingCorrelationEngine: top groups "
            + ", ".join(f"{g.primary.name}={g.score:.3f}" for g in ranked)
        )
        return ranked

    @staticmethod
    def summarise(groups: List[FindingGroup]) -> Dict[str, Any]:
        """
        Compact summary dict suitable for JSON API responses.

        Example output:
        {
            "total_groups": 2,
            "grouped_findings": 3,
            "top_group_score": 0.7338,
            "groups": [{...}, {...}]
        }
        """
        return {
            "total_groups":     len(groups),
            "grouped_findings": sum(len(g.diseases) for g in groups),
            "top_group_score":  groups[0].score if groups else None,
            "groups":           [g.to_dict() for g in groups],
        }

    def analyze(
        self,
        findings: Sequence[Finding],
        top_n: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Ranking summary plus headline triage for one scan."""
        summary = self.summarise(self.rank(findings, top_n=top_n))
        summary["triage"] = assess(findings).to_dict()
        return summary
