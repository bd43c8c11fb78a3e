"""Sub-score calculators (quality, compliance, operational, market).

Each calculator is a pure function returning a 0-100 score, or None when
none of its inputs are known. A pre-computed score on the record takes
precedence over the rubric.
"""

import math
from typing import Optional

from app.models import ProviderRecord, ScoringCriteria


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    # max/min pass NaN through as the bound
    if not math.isfinite(value):
        raise ValueError(f"Cannot score non-finite value {value}")
    return max(low, min(high, value))


def _average(components: list[Optional[float]]) -> Optional[float]:
    known = [c for c in components if c is not None]
    if not known:
        return None
    return sum(known) / len(known)


def _star_score(star: Optional[float]) -> Optional[float]:
    """Map a 1-5 CMS star rating onto 0-100."""
    if star is None:
        return None
    return clamp((star - 1) / 4 * 100)


def _count_penalty(count: Optional[int], per_item: float) -> Optional[float]:
    if count is None:
        return None
    return clamp(100 - per_item * count)


def adc_fit_score(adc: Optional[float], criteria: ScoringCriteria) -> Optional[float]:
    """Score how well the census fits the acquisition size band."""
    if adc is None:
        return None
    if adc <= 0:
        return 0.0
    if criteria.adc_floor <= adc <= criteria.adc_ceiling:
        return 100.0
    if adc < criteria.adc_floor:
        return 50.0
    if adc <= criteria.adc_ceiling * criteria.adc_stretch_factor:
        return 60.0
    return 20.0


def margin_score(record: ProviderRecord) -> Optional[float]:
    """Map operating margin onto 0-100 (+20% margin scores 100, -20% scores 0)."""
    if record.net_income is None or not record.total_revenue:
        return None
    if record.total_revenue < 0:
        return None
    margin = record.net_income / record.total_revenue
    return clamp(50 + margin * 250)


def quality_score(record: ProviderRecord) -> Optional[float]:
    """Quality from CMS star ratings and inspection deficiencies."""
    if record.quality_score is not None:
        return clamp(record.quality_score)

    return _average([
        _star_score(record.cms_quality_star),
        _star_score(record.cms_cahps_star),
        _count_penalty(record.deficiency_count, 15),
    ])


def compliance_score(record: ProviderRecord) -> Optional[float]:
    """Compliance from deficiency counts and complaint history."""
    if record.compliance_score is not None:
        return clamp(record.compliance_score)

    return _average([
        _count_penalty(record.deficiency_count, 12),
        _count_penalty(record.complaint_count, 20),
    ])


def operational_score(
    record: ProviderRecord,
    criteria: ScoringCriteria,
) -> Optional[float]:
    """Operational fit from census size and operating margin."""
    if record.operational_score is not None:
        return clamp(record.operational_score)

    return _average([
        adc_fit_score(record.estimated_adc, criteria),
        margin_score(record),
    ])


def _senior_population_score(record: ProviderRecord) -> Optional[float]:
    if record.county_pct_65_plus is not None:
        pct = record.county_pct_65_plus
        if pct >= 20:
            return 100.0
        if pct >= 15:
            return 70.0
        return 30.0

    if record.county_pop_65_plus is not None:
        pop = record.county_pop_65_plus
        if pop >= 50_000:
            return 100.0
        if pop >= 20_000:
            return 70.0
        return 40.0

    return None


def _income_score(income: Optional[float]) -> Optional[float]:
    if income is None:
        return None
    if income >= 75_000:
        return 100.0
    if income >= 55_000:
        return 70.0
    return 40.0


def _con_score(con_state: Optional[bool]) -> Optional[float]:
    if con_state is None:
        return None
    return 100.0 if con_state else 50.0


def market_score(
    record: ProviderRecord,
    criteria: ScoringCriteria,
) -> Optional[float]:
    """Market attractiveness from 65+ density, income and CON protection."""
    if record.market_score is not None:
        return clamp(record.market_score)

    return _average([
        _senior_population_score(record),
        _income_score(record.county_median_income),
        _con_score(record.con_state),
    ])
