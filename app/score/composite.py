"""Composite scoring over the four sub-scores."""

import logging
from typing import Optional

from app.models import (
    ConfidenceLevel,
    ProviderRecord,
    ScoreBreakdown,
    ScoringCriteria,
)
from app.models.criteria import SUBSCORE_NAMES
from . import subscores

logger = logging.getLogger(__name__)

# At least one of these must be known before an overall score is reported
REGULATORY_SUBSCORES = ("quality", "compliance")


class CompositeScorer:
    """Weight available sub-scores into an overall score."""

    def __init__(self, criteria: Optional[ScoringCriteria] = None):
        self.criteria = criteria or ScoringCriteria()

    def score(self, record: ProviderRecord) -> ScoreBreakdown:
        """Compute sub-scores and the composite for a record."""
        sub = {
            "quality": subscores.quality_score(record),
            "compliance": subscores.compliance_score(record),
            "operational": subscores.operational_score(record, self.criteria),
            "market": subscores.market_score(record, self.criteria),
        }
        return self.combine(sub)

    def combine(self, sub: dict[str, Optional[float]]) -> ScoreBreakdown:
        """Build a breakdown from already computed sub-scores."""
        available = {name: value for name, value in sub.items() if value is not None}
        overall = self._weighted_average(available)

        if overall is not None and not any(name in available for name in REGULATORY_SUBSCORES):
            logger.debug("No regulatory sub-score available, withholding overall score")
            overall = None

        return ScoreBreakdown(
            quality=sub.get("quality"),
            compliance=sub.get("compliance"),
            operational=sub.get("operational"),
            market=sub.get("market"),
            overall_score=overall,
            confidence_level=self.confidence_for(len(available)),
            available_count=len(available),
        )

    def _weighted_average(self, available: dict[str, float]) -> Optional[float]:
        """Average over available sub-scores, renormalizing their weights."""
        if not available:
            return None

        weights = self.criteria.weights.as_dict()
        total_weight = sum(weights[name] for name in available)
        if total_weight == 0:
            return None

        weighted_sum = sum(value * weights[name] for name, value in available.items())
        return round(weighted_sum / total_weight, 1)

    @staticmethod
    def confidence_for(available_count: int) -> ConfidenceLevel:
        if available_count >= len(SUBSCORE_NAMES):
            return ConfidenceLevel.HIGH
        if available_count >= 2:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
