"""Tests for market consolidation roll-ups."""

import pytest

from app.market import MarketConsolidationAnalyzer
from app.models import Classification
from app.score import ProviderScorer


def evaluate(*records):
    return [ProviderScorer().evaluate(r) for r in records]


@pytest.fixture
def evaluations():
    return evaluate(
        {
            "ccn": "A",
            "state": "TX",
            "county": "Travis",
            "ownership_type": "For-Profit",
            "quality_score": 80,
            "compliance_score": 80,
            "estimated_adc": 50,
            "con_state": True,
            "owner_count": 1,
            "pe_backed": False,
            "chain_affiliated": False,
            "total_revenue": 2_000_000,
        },
        {
            "ccn": "B",
            "state": "TX",
            "county": "Harris",
            "ownership_type": "For-Profit",
            "quality_score": 50,
            "compliance_score": 50,
            "estimated_adc": 20,
            "pe_backed": True,
            "chain_affiliated": True,
        },
        {"ccn": "C", "state": "OK"},
    )


class TestConsolidationReport:
    """Tests for grouped aggregates."""

    def test_fixture_classifications(self, evaluations):
        assert [e.classification.classification for e in evaluations] == [
            Classification.GREEN,
            Classification.YELLOW,
            Classification.RED,
        ]

    def test_summary_counts(self, evaluations):
        summary = MarketConsolidationAnalyzer().analyze(evaluations).summary
        assert summary.key == "ALL"
        assert summary.total == 3
        assert (summary.green_count, summary.yellow_count, summary.red_count) == (1, 1, 1)
        assert summary.pe_backed_count == 1
        assert summary.pe_penetration == pytest.approx(0.3333)
        assert summary.chain_count == 1
        assert summary.independent_count == 1
        assert summary.green_rate == pytest.approx(0.3333)
        assert summary.avg_adc == 35.0
        assert summary.total_revenue == 2_000_000
        assert summary.is_con_state

    def test_average_score_skips_unknown(self, evaluations):
        summary = MarketConsolidationAnalyzer().analyze(evaluations).summary
        known = [e.breakdown.overall_score for e in evaluations[:2]]
        assert summary.avg_overall_score == pytest.approx(sum(known) / 2, abs=0.05)

    def test_groups_sorted_by_key(self, evaluations):
        report = MarketConsolidationAnalyzer().analyze(evaluations)
        assert [g.key for g in report.by_state] == ["OK", "TX"]
        assert [g.key for g in report.by_county] == ["OK/Unknown", "TX/Harris", "TX/Travis"]
        assert [g.key for g in report.by_ownership] == ["For-Profit", "Unknown"]

    def test_group_without_data_has_null_averages(self, evaluations):
        report = MarketConsolidationAnalyzer().analyze(evaluations)
        oklahoma = report.by_state[0]
        assert oklahoma.total == 1
        assert oklahoma.avg_overall_score is None
        assert oklahoma.avg_adc is None
        assert oklahoma.pe_penetration == 0.0
        assert not oklahoma.is_con_state

    def test_analysis_is_idempotent(self, evaluations):
        analyzer = MarketConsolidationAnalyzer()
        assert analyzer.analyze(evaluations) == analyzer.analyze(evaluations)

    def test_merged_slices_match_whole(self, evaluations):
        analyzer = MarketConsolidationAnalyzer()
        left = analyzer.accumulate(evaluations[:1])
        right = analyzer.accumulate(evaluations[1:])
        whole = analyzer.analyze(evaluations)
        assert left.merge(right).finalize() == whole

    def test_empty_input(self):
        report = MarketConsolidationAnalyzer().analyze([])
        assert report.summary.total == 0
        assert report.summary.pe_penetration is None
        assert report.summary.avg_overall_score is None
        assert report.by_state == []


class TestDealPipelineStats:
    """Tests for acquisition track counts."""

    def test_pipeline_counts(self, evaluations):
        tuckin = evaluate({
            "ccn": "D",
            "state": "TX",
            "county": "Travis",
            "quality_score": 60,
            "compliance_score": 90,
            "estimated_adc": 30,
            "pe_backed": False,
        })
        stats = MarketConsolidationAnalyzer().pipeline_stats(evaluations + tuckin)
        assert stats.platform_candidates == 1
        assert stats.tuckin_candidates == 1
        assert stats.owner_finance_targets == 1
        assert stats.con_protected_independent == 1
        assert stats.with_financials == 1
        assert stats.needs_review == 4

    def test_unknown_pe_status_is_not_tuckin(self):
        records = evaluate({"ccn": "E", "compliance_score": 90, "estimated_adc": 30})
        stats = MarketConsolidationAnalyzer().pipeline_stats(records)
        assert stats.tuckin_candidates == 0
