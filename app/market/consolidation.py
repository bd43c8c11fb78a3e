"""Market consolidation roll-ups over classified providers."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from app.models import Classification, ProviderEvaluation

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def _ratio(numerator: float, denominator: float) -> Optional[float]:
    if denominator == 0:
        return None
    return round(numerator / denominator, 4)


class GroupStats(BaseModel):
    """Aggregates for one state, county or ownership group."""

    key: str
    total: int
    green_count: int
    yellow_count: int
    red_count: int
    pe_backed_count: int
    pe_penetration: Optional[float] = Field(description="PE-backed / total")
    chain_count: int
    chain_penetration: Optional[float]
    independent_count: int = Field(description="Neither PE-backed nor chain affiliated")
    green_rate: Optional[float]
    avg_overall_score: Optional[float]
    avg_adc: Optional[float]
    total_revenue: float = Field(description="Sum of known revenue")
    is_con_state: bool


class ConsolidationReport(BaseModel):
    summary: GroupStats
    by_state: list[GroupStats]
    by_county: list[GroupStats]
    by_ownership: list[GroupStats]


class DealPipelineStats(BaseModel):
    """Counts of providers in each acquisition track."""

    platform_candidates: int
    tuckin_candidates: int
    owner_finance_targets: int
    con_protected_independent: int
    with_financials: int
    needs_review: int


@dataclass
class GroupAccumulator:
    """Mergeable running totals for a group.

    ``add`` and ``merge`` only sum counts, so partial accumulators built
    on separate slices of a batch combine to the same result in any order.
    """

    total: int = 0
    green: int = 0
    yellow: int = 0
    red: int = 0
    pe_backed: int = 0
    chain: int = 0
    independent: int = 0
    score_sum: float = 0.0
    score_count: int = 0
    adc_sum: float = 0.0
    adc_count: int = 0
    revenue_sum: float = 0.0
    con_state: bool = False

    def add(self, evaluation: ProviderEvaluation) -> None:
        record = evaluation.record
        self.total += 1

        classification = evaluation.classification.classification
        if classification == Classification.GREEN:
            self.green += 1
        elif classification == Classification.YELLOW:
            self.yellow += 1
        else:
            self.red += 1

        if record.pe_backed:
            self.pe_backed += 1
        if record.chain_affiliated:
            self.chain += 1
        if record.is_independent:
            self.independent += 1

        score = evaluation.breakdown.overall_score
        if score is not None:
            self.score_sum += score
            self.score_count += 1
        if record.estimated_adc is not None:
            self.adc_sum += record.estimated_adc
            self.adc_count += 1

        self.revenue_sum += record.total_revenue or 0.0
        self.con_state = self.con_state or bool(record.con_state)

    def merge(self, other: "GroupAccumulator") -> "GroupAccumulator":
        return GroupAccumulator(
            total=self.total + other.total,
            green=self.green + other.green,
            yellow=self.yellow + other.yellow,
            red=self.red + other.red,
            pe_backed=self.pe_backed + other.pe_backed,
            chain=self.chain + other.chain,
            independent=self.independent + other.independent,
            score_sum=self.score_sum + other.score_sum,
            score_count=self.score_count + other.score_count,
            adc_sum=self.adc_sum + other.adc_sum,
            adc_count=self.adc_count + other.adc_count,
            revenue_sum=self.revenue_sum + other.revenue_sum,
            con_state=self.con_state or other.con_state,
        )

    def finalize(self, key: str) -> GroupStats:
        avg_score = _ratio(self.score_sum, self.score_count)
        avg_adc = _ratio(self.adc_sum, self.adc_count)
        return GroupStats(
            key=key,
            total=self.total,
            green_count=self.green,
            yellow_count=self.yellow,
            red_count=self.red,
            pe_backed_count=self.pe_backed,
            pe_penetration=_ratio(self.pe_backed, self.total),
            chain_count=self.chain,
            chain_penetration=_ratio(self.chain, self.total),
            independent_count=self.independent,
            green_rate=_ratio(self.green, self.total),
            avg_overall_score=round(avg_score, 1) if avg_score is not None else None,
            avg_adc=round(avg_adc, 1) if avg_adc is not None else None,
            total_revenue=self.revenue_sum,
            is_con_state=self.con_state,
        )


@dataclass
class ConsolidationAccumulator:
    """Grouped accumulators for a whole batch."""

    summary: GroupAccumulator = field(default_factory=GroupAccumulator)
    states: dict[str, GroupAccumulator] = field(default_factory=dict)
    counties: dict[str, GroupAccumulator] = field(default_factory=dict)
    ownership: dict[str, GroupAccumulator] = field(default_factory=dict)

    def add(self, evaluation: ProviderEvaluation) -> None:
        record = evaluation.record
        state = record.state or UNKNOWN
        county = f"{state}/{record.county or UNKNOWN}"
        ownership = record.ownership_type or UNKNOWN

        self.summary.add(evaluation)
        self.states.setdefault(state, GroupAccumulator()).add(evaluation)
        self.counties.setdefault(county, GroupAccumulator()).add(evaluation)
        self.ownership.setdefault(ownership, GroupAccumulator()).add(evaluation)

    def merge(self, other: "ConsolidationAccumulator") -> "ConsolidationAccumulator":
        return ConsolidationAccumulator(
            summary=self.summary.merge(other.summary),
            states=_merge_groups(self.states, other.states),
            counties=_merge_groups(self.counties, other.counties),
            ownership=_merge_groups(self.ownership, other.ownership),
        )

    def finalize(self) -> ConsolidationReport:
        return ConsolidationReport(
            summary=self.summary.finalize("ALL"),
            by_state=_finalize_groups(self.states),
            by_county=_finalize_groups(self.counties),
            by_ownership=_finalize_groups(self.ownership),
        )


def _merge_groups(
    left: dict[str, GroupAccumulator],
    right: dict[str, GroupAccumulator],
) -> dict[str, GroupAccumulator]:
    merged = {}
    for key in set(left) | set(right):
        merged[key] = left.get(key, GroupAccumulator()).merge(
            right.get(key, GroupAccumulator())
        )
    return merged


def _finalize_groups(groups: dict[str, GroupAccumulator]) -> list[GroupStats]:
    return [groups[key].finalize(key) for key in sorted(groups)]


class MarketConsolidationAnalyzer:
    """Roll classified providers up by state, county and ownership type."""

    # Pipeline thresholds
    PLATFORM_MIN_ADC = 40
    PLATFORM_MIN_SCORE = 70
    OWNER_FINANCE_MAX_OWNERS = 2

    def accumulate(self, evaluations: Iterable[ProviderEvaluation]) -> ConsolidationAccumulator:
        """Map step: build an accumulator for a slice of evaluations."""
        acc = ConsolidationAccumulator()
        for evaluation in evaluations:
            acc.add(evaluation)
        return acc

    def analyze(self, evaluations: Iterable[ProviderEvaluation]) -> ConsolidationReport:
        """Aggregate a full set of evaluations."""
        report = self.accumulate(evaluations).finalize()
        logger.debug(
            f"Consolidation over {report.summary.total} providers, "
            f"{len(report.by_state)} states"
        )
        return report

    def pipeline_stats(self, evaluations: Iterable[ProviderEvaluation]) -> DealPipelineStats:
        """Count providers in each acquisition track."""
        platform = tuckin = owner_finance = con_protected = financials = review = 0

        for e in evaluations:
            record = e.record
            classification = e.classification.classification
            green = classification == Classification.GREEN
            score = e.breakdown.overall_score
            adc = record.estimated_adc

            if (
                green
                and adc is not None and adc >= self.PLATFORM_MIN_ADC
                and score is not None and score >= self.PLATFORM_MIN_SCORE
            ):
                platform += 1
            if (
                classification in (Classification.GREEN, Classification.YELLOW)
                and adc is not None and adc < self.PLATFORM_MIN_ADC
                and record.pe_backed is False
            ):
                tuckin += 1
            if (
                green
                and record.is_independent
                and record.owner_count is not None
                and record.owner_count <= self.OWNER_FINANCE_MAX_OWNERS
            ):
                owner_finance += 1
            if green and record.con_state and record.pe_backed is False:
                con_protected += 1
            if green and record.total_revenue is not None:
                financials += 1
            if e.data_quality.needs_review:
                review += 1

        return DealPipelineStats(
            platform_candidates=platform,
            tuckin_candidates=tuckin,
            owner_finance_targets=owner_finance,
            con_protected_independent=con_protected,
            with_financials=financials,
            needs_review=review,
        )
