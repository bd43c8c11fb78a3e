"""Tests for valuation ranges."""

import pytest

from app.errors import InvalidConfigurationError
from app.models import IndustryMultiples, ProviderRecord
from app.score.valuation import ValuationCalculator


def make_record(**kwargs) -> ProviderRecord:
    """Create a test provider record with defaults."""
    defaults = {"ccn": "100001", "provider_name": "Test Hospice"}
    defaults.update(kwargs)
    return ProviderRecord(**defaults)


def make_multiples(**kwargs) -> IndustryMultiples:
    """Create test multiples with defaults."""
    defaults = {
        "revenue_multiple": {"low": 1.0, "median": 1.5, "high": 2.0},
        "per_adc_value": {"low": 8_000, "median": 10_000, "high": 12_000},
    }
    defaults.update(kwargs)
    return IndustryMultiples(**defaults)


class TestValuationCalculator:
    """Tests for revenue- and census-based valuations."""

    def test_revenue_based_range(self):
        multiples = IndustryMultiples(revenue_multiple={"low": 1, "median": 1.5, "high": 2})
        result = ValuationCalculator(multiples).value(make_record(total_revenue=1_000_000))
        assert result.revenue_based.low == 1_000_000
        assert result.revenue_based.median == 1_500_000
        assert result.revenue_based.high == 2_000_000
        assert result.revenue_basis == "total_revenue"
        assert result.adc_based is None

    def test_adc_based_range(self):
        result = ValuationCalculator(make_multiples()).value(make_record(estimated_adc=40))
        assert result.adc_based.low == 320_000
        assert result.adc_based.median == 400_000
        assert result.adc_based.high == 480_000

    def test_unknown_adc_is_not_zero(self):
        result = ValuationCalculator(make_multiples()).value(make_record(total_revenue=500_000))
        assert result.adc_based is None
        assert result.revenue_based is not None

    def test_falls_back_to_nonprofit_revenue(self):
        record = make_record(nonprofit_revenue=2_000_000)
        result = ValuationCalculator(make_multiples()).value(record)
        assert result.revenue_basis == "nonprofit_revenue"
        assert result.revenue_based.median == 3_000_000

    def test_cost_report_revenue_preferred(self):
        record = make_record(total_revenue=1_000_000, nonprofit_revenue=2_000_000)
        result = ValuationCalculator(make_multiples()).value(record)
        assert result.revenue_basis == "total_revenue"

    def test_no_revenue_is_not_computable(self):
        result = ValuationCalculator(make_multiples()).value(make_record())
        assert result.revenue_based is None
        assert result.revenue_basis is None
        assert result.adc_based is None

    def test_known_zero_revenue_values_at_zero(self):
        result = ValuationCalculator(make_multiples()).value(make_record(total_revenue=0))
        assert result.revenue_based.median == 0

    @pytest.mark.parametrize("revenue,adc", [(0, 0), (750_000, 12), (9_500_000, 180.5)])
    def test_tiers_are_ordered(self, revenue, adc):
        record = make_record(total_revenue=revenue, estimated_adc=adc)
        result = ValuationCalculator(make_multiples()).value(record)
        for tiers in (result.revenue_based, result.adc_based):
            assert 0 <= tiers.low <= tiers.median <= tiers.high


class TestIndustryMultiples:
    """Tests for multiples validation."""

    def test_negative_multiple_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            make_multiples(revenue_multiple={"low": -1, "median": 1, "high": 2})

    def test_inverted_tiers_rejected(self):
        with pytest.raises(InvalidConfigurationError) as exc:
            make_multiples(per_adc_value={"low": 12_000, "median": 10_000, "high": 8_000})
        assert "per_adc_value" in str(exc.value)
