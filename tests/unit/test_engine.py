"""
Unit Tests for the Finding Correlation Engine (ranking facade)
"""
import json
import threading

import pytest

from chestscan.core.correlation import (
    CorrelationConfig,
    Finding,
    FindingCorrelationEngine,
    KnowledgeBase,
)


class TestRank:
    """Tests for FindingCorrelationEngine.rank."""

    def test_empty_input(self, engine):
        assert engine.rank([]) == []

    def test_single_finding(self, engine):
        groups = engine.rank([Finding("Hernia", 0.40)])

        assert len(groups) == 1
        assert groups[0].score == pytest.approx(0.4008)

    def test_related_findings_form_one_group(self, engine):
        groups = engine.rank([Finding("Pneumonia", 0.80), Finding("Infiltration", 0.78)])

        assert len(groups) == 1
        group = groups[0]
        assert group.primary.name == "Pneumonia"
        assert group.diseases[1].is_child is True
        assert group.diseases[1].parent_disease == "Pneumonia"
        assert group.diseases[1].correlation == 0.85

    def test_unrelated_findings_stay_separate(self, engine):
        groups = engine.rank([Finding("Hernia", 0.40), Finding("Emphysema", 0.35)])

        assert [[d.name for d in g.diseases] for g in groups] == [["Hernia"], ["Emphysema"]]

    def test_top_three_of_five_unrelated(self, engine, unrelated_findings):
        groups = engine.rank(unrelated_findings, top_n=3)

        assert [g.primary.name for g in groups] == [
            "Pleural Thickening", "Emphysema", "Hernia",
        ]

    def test_default_top_n_from_config(self, default_kb, unrelated_findings):
        engine = FindingCorrelationEngine(default_kb, CorrelationConfig(top_n=2))
        assert len(engine.rank(unrelated_findings)) == 2
        assert len(engine.rank(unrelated_findings, top_n=4)) == 4

    def test_fewer_groups_than_top_n(self, engine):
        assert len(engine.rank([Finding("Hernia", 0.4)], top_n=3)) == 1

    @pytest.mark.parametrize("top_n", [1, 2, 3, 10])
    def test_sorted_and_bounded(self, engine, top_n):
        findings = [
            Finding("Pneumonia", 0.62), Finding("Infiltration", 0.60),
            Finding("Cardiomegaly", 0.45), Finding("Edema", 0.44),
            Finding("Mass", 0.30), Finding("Nodule", 0.20),
            Finding("Hernia", 0.05), Finding("Fibrosis", 0.50),
        ]
        groups = engine.rank(findings, top_n=top_n)

        assert len(groups) <= top_n
        scores = [g.score for g in groups]
        assert scores == sorted(scores, reverse=True)

    def test_equal_scores_keep_cluster_order(self, synthetic_engine):
        groups = synthetic_engine.rank([Finding("U1", 0.5), Finding("U2", 0.5)])
        assert [g.primary.name for g in groups] == ["U1", "U2"]

    def test_default_knowledge_base_is_used(self):
        engine = FindingCorrelationEngine()
        assert engine.knowledge_base.prevalence_of("Hernia") == 0.002

    def test_injected_knowledge_base(self):
        kb = KnowledgeBase.from_dict({
            "relationships": {"Hernia": {"Emphysema": {"correlation": 0.9}}}
        })
        engine = FindingCorrelationEngine(knowledge_base=kb)

        groups = engine.rank([Finding("Hernia", 0.40), Finding("Emphysema", 0.10)])

        assert len(groups) == 1
        assert [d.name for d in groups[0].diseases] == ["Hernia", "Emphysema"]

    def test_concurrent_calls_share_engine(self, engine, unrelated_findings):
        expected = [g.to_dict() for g in engine.rank(unrelated_findings)]
        results = []

        def worker():
            results.append([g.to_dict() for g in engine.rank(unrelated_findings)])

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [expected] * 8


class TestSummaries:
    """Tests for summarise() and analyze()."""

    def test_summarise_empty(self):
        assert FindingCorrelationEngine.summarise([]) == {
            "total_groups": 0,
            "grouped_findings": 0,
            "top_group_score": None,
            "groups": [],
        }

    def test_summarise_is_json_serialisable(self, engine):
        groups = engine.rank([
            Finding("Pneumonia", 0.80), Finding("Infiltration", 0.78), Finding("Hernia", 0.1),
        ])
        summary = FindingCorrelationEngine.summarise(groups)

        assert summary["total_groups"] == 2
        assert summary["grouped_findings"] == 3
        assert summary["top_group_score"] == groups[0].score
        decoded = json.loads(json.dumps(summary))
        assert decoded["groups"][0]["diseases"][1]["parent_disease"] == "Pneumonia"
        assert decoded["groups"][0]["hierarchy_bonus"] == pytest.approx(0.1)

    def test_analyze_includes_triage(self, engine):
        result = engine.analyze([Finding("Effusion", 0.91), Finding("Hernia", 0.2)])

        assert result["total_groups"] == 2
        assert result["triage"]["condition"] == "Effusion"
        assert result["triage"]["probability"] == 91
        assert result["triage"]["severity"] == "High"

    def test_analyze_empty(self, engine):
        result = engine.analyze([])

        assert result["groups"] == []
        assert result["triage"]["condition"] == "No Finding"
        assert result["triage"]["severity"] == "Low"
