"""GREEN / YELLOW / RED classification from confirming signals."""

import logging
from dataclasses import dataclass
from typing import Optional

from app.models import (
    Classification,
    ClassificationResult,
    OwnershipComplexity,
    ProviderRecord,
    ScoreBreakdown,
    ScoringCriteria,
)

logger = logging.getLogger(__name__)


@dataclass
class Signal:
    """One independently evaluated condition."""

    name: str
    fired: bool
    reason: str


class ClassificationEngine:
    """Classify a scored provider as GREEN, YELLOW or RED.

    Signals are evaluated in a fixed order so the reason list is stable:
    ADC in range, quality, compliance, CON state, simple ownership.
    """

    def __init__(self, criteria: Optional[ScoringCriteria] = None):
        self.criteria = criteria or ScoringCriteria()

    def classify(
        self,
        record: ProviderRecord,
        breakdown: ScoreBreakdown,
    ) -> ClassificationResult:
        """Classify a record given its score breakdown."""
        signals = self.evaluate_signals(record, breakdown)
        fired = {s.name for s in signals if s.fired}
        count = len(fired)

        classification = Classification.RED
        if breakdown.overall_score is not None:
            if (
                count >= self.criteria.green_min_signals
                and {"adc_in_range", "quality", "compliance"} <= fired
            ):
                classification = Classification.GREEN
            elif count >= self.criteria.yellow_min_signals:
                classification = Classification.YELLOW

        logger.debug(
            f"{record.ccn}: {classification.value} with {count} confirming signals"
        )

        return ClassificationResult(
            classification=classification,
            reasons=[s.reason for s in signals if s.fired],
            confirming_signals=count,
            signals={s.name: s.fired for s in signals},
            unmet=[s.reason for s in signals if not s.fired],
        )

    def evaluate_signals(
        self,
        record: ProviderRecord,
        breakdown: ScoreBreakdown,
    ) -> list[Signal]:
        """Evaluate every confirming signal in order."""
        return [
            self._adc_signal(record),
            self._threshold_signal(
                "quality", "Quality", breakdown.quality, self.criteria.min_quality_score
            ),
            self._threshold_signal(
                "compliance",
                "Compliance",
                breakdown.compliance,
                self.criteria.min_compliance_score,
            ),
            self._con_signal(record),
            self._ownership_signal(record),
        ]

    def _adc_signal(self, record: ProviderRecord) -> Signal:
        adc = record.estimated_adc
        floor, ceiling = self.criteria.adc_floor, self.criteria.adc_ceiling
        if adc is None:
            return Signal("adc_in_range", False, "ADC unknown")
        if floor <= adc <= ceiling:
            return Signal(
                "adc_in_range", True, f"ADC {adc:g} within target range (<= {ceiling:g})"
            )
        return Signal(
            "adc_in_range", False, f"ADC {adc:g} outside target range (<= {ceiling:g})"
        )

    @staticmethod
    def _threshold_signal(
        name: str,
        label: str,
        score: Optional[float],
        threshold: float,
    ) -> Signal:
        if score is None:
            return Signal(name, False, f"{label} score unknown")
        if score >= threshold:
            return Signal(name, True, f"{label} score {score:g} >= {threshold:g}")
        return Signal(name, False, f"{label} score {score:g} below {threshold:g}")

    @staticmethod
    def _con_signal(record: ProviderRecord) -> Signal:
        if record.con_state:
            return Signal("con_state", True, "Certificate of Need state (protected market)")
        if record.con_state is None:
            return Signal("con_state", False, "CON status unknown")
        return Signal("con_state", False, "Not a Certificate of Need state")

    def _ownership_signal(self, record: ProviderRecord) -> Signal:
        limit = self.criteria.max_owner_count
        if record.owner_count is not None and record.owner_count < limit:
            return Signal(
                "simple_ownership", True, f"Simple ownership ({record.owner_count} owner(s))"
            )
        if record.ownership_complexity == OwnershipComplexity.SIMPLE:
            return Signal("simple_ownership", True, "Simple ownership structure")
        if record.owner_count is None and record.ownership_complexity is None:
            return Signal("simple_ownership", False, "Ownership structure unknown")
        return Signal("simple_ownership", False, "Ownership structure is not simple")
