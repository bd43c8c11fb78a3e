"""Tests for GREEN/YELLOW/RED classification."""

import pytest

from app.models import Classification, ProviderRecord, ScoringCriteria
from app.score.classifier import ClassificationEngine
from app.score.composite import CompositeScorer


def make_record(**kwargs) -> ProviderRecord:
    """Create a test provider record with defaults."""
    defaults = {"ccn": "100001", "provider_name": "Test Hospice"}
    defaults.update(kwargs)
    return ProviderRecord(**defaults)


def classify(record: ProviderRecord, criteria: ScoringCriteria = None):
    criteria = criteria or ScoringCriteria()
    breakdown = CompositeScorer(criteria).score(record)
    return ClassificationEngine(criteria).classify(record, breakdown)


class TestClassificationScenarios:
    """Reference scenarios."""

    def test_strong_target_is_green(self):
        record = make_record(
            quality_score=80, compliance_score=75, estimated_adc=40, con_state=True, owner_count=1
        )
        result = classify(record)
        assert result.classification == Classification.GREEN
        assert result.confirming_signals >= 3

    def test_weak_quality_is_yellow(self):
        record = make_record(quality_score=50, compliance_score=90, estimated_adc=40)
        result = classify(record)
        assert result.classification == Classification.YELLOW
        assert result.confirming_signals == 2
        assert not result.signals["quality"]

    def test_no_data_is_red(self):
        record = make_record(quality_score=None, compliance_score=None, estimated_adc=None)
        result = classify(record)
        assert result.classification == Classification.RED
        assert result.confirming_signals == 0
        assert result.reasons == []


class TestClassificationRules:
    """Tests for individual rules and boundaries."""

    def test_reasons_follow_signal_order(self):
        record = make_record(
            quality_score=80, compliance_score=75, estimated_adc=40, con_state=True, owner_count=1
        )
        result = classify(record)
        assert list(result.signals) == [
            "adc_in_range", "quality", "compliance", "con_state", "simple_ownership",
        ]
        assert len(result.reasons) == 5
        assert result.reasons[0].startswith("ADC 40")
        assert "Certificate of Need" in result.reasons[3]
        assert result.unmet == []

    def test_classification_is_deterministic(self):
        record = make_record(quality_score=72, compliance_score=88, estimated_adc=55, owner_count=2)
        assert classify(record) == classify(record)

    def test_green_requires_adc_in_range(self):
        record = make_record(
            quality_score=90, compliance_score=90, estimated_adc=80, con_state=True, owner_count=1
        )
        result = classify(record)
        assert result.confirming_signals == 4
        assert result.classification == Classification.YELLOW
        assert any("outside target range" in reason for reason in result.unmet)

    def test_green_requires_compliance(self):
        record = make_record(
            quality_score=90, compliance_score=65, estimated_adc=30, con_state=True, owner_count=1
        )
        assert classify(record).classification == Classification.YELLOW

    def test_exactly_three_signals_is_green(self):
        record = make_record(
            quality_score=80, compliance_score=80, estimated_adc=40, con_state=False, owner_count=5
        )
        result = classify(record)
        assert result.confirming_signals == 3
        assert result.classification == Classification.GREEN

    def test_raised_signal_minimum_demotes(self):
        record = make_record(
            quality_score=80, compliance_score=80, estimated_adc=40, con_state=False, owner_count=5
        )
        result = classify(record, ScoringCriteria(green_min_signals=4))
        assert result.classification == Classification.YELLOW

    def test_threshold_is_inclusive(self):
        record = make_record(quality_score=70, compliance_score=70, estimated_adc=40)
        result = classify(record)
        assert result.signals["quality"]
        assert result.signals["compliance"]
        assert result.classification == Classification.GREEN

    def test_scores_just_under_threshold_are_not_rounded_up(self):
        record = make_record(quality_score=69.99, compliance_score=80, estimated_adc=40)
        result = classify(record)
        assert not result.signals["quality"]
        assert result.classification == Classification.YELLOW

    def test_insufficient_data_is_never_green(self):
        record = make_record(estimated_adc=40, con_state=True, owner_count=1)
        result = classify(record)
        assert result.confirming_signals == 3
        assert result.classification == Classification.RED

    def test_single_signal_is_yellow(self):
        record = make_record(compliance_score=90)
        assert classify(record).classification == Classification.YELLOW

    def test_raised_yellow_minimum(self):
        record = make_record(compliance_score=90)
        result = classify(record, ScoringCriteria(yellow_min_signals=2))
        assert result.classification == Classification.RED

    def test_simple_complexity_counts_as_simple_ownership(self):
        record = make_record(quality_score=50, ownership_complexity="simple")
        result = classify(record)
        assert result.signals["simple_ownership"]

    def test_many_owners_is_not_simple(self):
        record = make_record(quality_score=50, owner_count=4, ownership_complexity="Complex")
        assert not classify(record).signals["simple_ownership"]

    def test_custom_adc_ceiling(self):
        record = make_record(quality_score=80, compliance_score=80, estimated_adc=75)
        assert classify(record).classification == Classification.YELLOW
        result = classify(record, ScoringCriteria(adc_ceiling=80))
        assert result.classification == Classification.GREEN


class TestClassificationMonotonicity:
    """Moving ADC out of range never adds signals."""

    @pytest.mark.parametrize("inside,outside", [(60, 61), (40, 200), (1, 90)])
    def test_leaving_adc_range_cannot_add_signals(self, inside, outside):
        base = {"quality_score": 75, "compliance_score": 72, "con_state": True, "owner_count": 1}
        in_range = classify(make_record(estimated_adc=inside, **base))
        out_of_range = classify(make_record(estimated_adc=outside, **base))
        assert out_of_range.confirming_signals <= in_range.confirming_signals
