"""Owner carry-back (seller financing) suitability scoring."""

import logging
from typing import Optional

from app.models import (
    CarryBackAnalysis,
    CarryBackFactor,
    ProviderRecord,
    ScoringCriteria,
)

logger = logging.getLogger(__name__)


class CarryBackScorer:
    """Score how receptive an owner is likely to be to carrying back a note.

    Advisory only: it never looks at classification. Unknown inputs earn no
    points and are reported as unknown instead of being assumed favorable.
    A half-known survey history earns at most half its factor.
    """

    MAX_POINTS = {
        "owner_age": 30,
        "years_in_business": 20,
        "facility_ownership": 15,
        "lease_timeline": 10,
        "deficiencies": 25,
    }

    HIGH_THRESHOLD = 70
    MEDIUM_THRESHOLD = 45

    def __init__(self, criteria: Optional[ScoringCriteria] = None):
        self.criteria = criteria or ScoringCriteria()

    def score(self, record: ProviderRecord) -> CarryBackAnalysis:
        """Compute the carry-back score and its contributing factors."""
        factors = [
            self._owner_age_factor(record),
            self._tenure_factor(record),
            self._facility_factor(record),
            self._lease_factor(record),
            self._deficiency_factor(record),
        ]

        total = max(0.0, min(100.0, sum(f.points for f in factors)))
        unknown = [f.name for f in factors if not f.known]
        if unknown:
            logger.debug(f"{record.ccn}: carry-back factors unknown: {', '.join(unknown)}")

        return CarryBackAnalysis(
            score=total,
            likelihood=self.likelihood_for(total),
            factors=factors,
            unknown_factors=unknown,
        )

    def likelihood_for(self, score: float) -> str:
        if score >= self.HIGH_THRESHOLD:
            return "HIGH"
        if score >= self.MEDIUM_THRESHOLD:
            return "MEDIUM"
        return "LOW"

    def _factor(self, name: str, points: float, reason: str) -> CarryBackFactor:
        return CarryBackFactor(
            name=name,
            points=points,
            max_points=self.MAX_POINTS[name],
            reason=reason,
        )

    def _unknown(self, name: str, reason: str) -> CarryBackFactor:
        return CarryBackFactor(
            name=name,
            points=0,
            max_points=self.MAX_POINTS[name],
            known=False,
            reason=reason,
        )

    def _owner_age_factor(self, record: ProviderRecord) -> CarryBackFactor:
        age = record.owner_age
        if age is None:
            return self._unknown("owner_age", "Owner age unknown")

        low, high = self.criteria.retirement_age_min, self.criteria.retirement_age_max
        if low <= age <= high:
            return self._factor(
                "owner_age", 30, f"Owner age {age} within retirement window {low}-{high}"
            )
        if age > high:
            return self._factor(
                "owner_age", 20, f"Owner age {age} past retirement window, succession pressure"
            )
        if age >= low - 5:
            return self._factor(
                "owner_age", 15, f"Owner age {age} approaching retirement window"
            )
        return self._factor("owner_age", 0, f"Owner age {age} well before retirement")

    def _tenure_factor(self, record: ProviderRecord) -> CarryBackFactor:
        years = record.years_in_business
        if years is None:
            return self._unknown("years_in_business", "Years in business unknown")
        if years >= 20:
            return self._factor("years_in_business", 20, f"{years:g} years in business, long-tenured owner")
        if years >= 10:
            return self._factor("years_in_business", 15, f"{years:g} years in business, established operator")
        if years >= 5:
            return self._factor("years_in_business", 8, f"{years:g} years in business")
        return self._factor("years_in_business", 2, f"Only {years:g} years in business")

    def _facility_factor(self, record: ProviderRecord) -> CarryBackFactor:
        if record.facility_owned is None:
            return self._unknown("facility_ownership", "Facility ownership unknown")
        if record.facility_owned:
            return self._factor(
                "facility_ownership", 15, "Facility owned outright, collateral for seller note"
            )
        return self._factor("facility_ownership", 0, "Facility is leased")

    def _lease_factor(self, record: ProviderRecord) -> CarryBackFactor:
        if record.facility_owned:
            return self._factor("lease_timeline", 10, "No lease exposure")

        remaining = record.lease_years_remaining
        if remaining is None:
            return self._unknown("lease_timeline", "Lease timeline unknown")
        if remaining >= 10:
            return self._factor("lease_timeline", 10, f"{remaining:g} years left on lease")
        if remaining >= 5:
            return self._factor("lease_timeline", 6, f"{remaining:g} years left on lease")
        return self._factor(
            "lease_timeline", 2, f"Lease expires in {remaining:g} years, renewal risk"
        )

    @staticmethod
    def _issue_points(issues: int) -> float:
        if issues == 0:
            return 25
        if issues <= 2:
            return 15
        if issues <= 5:
            return 8
        return 0

    def _deficiency_factor(self, record: ProviderRecord) -> CarryBackFactor:
        deficiencies, complaints = record.deficiency_count, record.complaint_count
        if deficiencies is None and complaints is None:
            return self._unknown("deficiencies", "Deficiency and complaint history unknown")

        if deficiencies is not None and complaints is not None:
            issues = deficiencies + complaints
            points = self._issue_points(issues)
            if issues == 0:
                reason = "Clean survey and complaint history"
            elif points == 0:
                reason = f"{issues} deficiencies/complaints, regulatory overhang"
            else:
                reason = f"{issues} deficiencies/complaints on record"
            return self._factor("deficiencies", points, reason)

        # Half the history is missing: score the known part, capped at half the factor
        if deficiencies is not None:
            issues, known_label, unknown_label = deficiencies, "deficiencies", "complaints"
        else:
            issues, known_label, unknown_label = complaints, "complaints", "deficiencies"

        return CarryBackFactor(
            name="deficiencies",
            points=min(self._issue_points(issues), self.MAX_POINTS["deficiencies"] / 2),
            max_points=self.MAX_POINTS["deficiencies"],
            known=False,
            reason=f"{issues} {known_label} on record, {unknown_label} unknown",
        )
