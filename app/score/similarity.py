"""Nearest-neighbor comparables over provider features."""

import logging
from typing import Iterable, Optional

from app.errors import InvalidConfigurationError
from app.models import (
    ProviderRecord,
    ScoringCriteria,
    SimilarityResult,
    SimilarProvider,
)
from .composite import CompositeScorer

logger = logging.getLogger(__name__)


class SimilarityEngine:
    """Find the providers most like a given one."""

    FEATURE_WEIGHTS = {
        "state": 0.25,
        "county": 0.15,
        "adc": 0.25,
        "ownership_type": 0.15,
        "score": 0.20,
    }

    # ADC gap at which the census component saturates
    ADC_SCALE = 100.0

    def __init__(self, criteria: Optional[ScoringCriteria] = None):
        self.criteria = criteria or ScoringCriteria()
        self.composite = CompositeScorer(self.criteria)

    def distance(self, a: ProviderRecord, b: ProviderRecord) -> float:
        """Weighted feature distance in [0, 1]; symmetric, 0 for identical records."""
        score_a = self.composite.score(a).overall_score
        score_b = self.composite.score(b).overall_score
        return self._distance(a, score_a, b, score_b)

    def nearest(
        self,
        query: ProviderRecord,
        pool: Iterable[ProviderRecord],
        k: Optional[int] = None,
    ) -> SimilarityResult:
        """Return the k nearest candidates, excluding the query itself.

        Raises InvalidConfigurationError if an explicit k is below 1.
        """
        if k is None:
            k = self.criteria.similarity_k
        elif k < 1:
            raise InvalidConfigurationError([f"k must be at least 1, got {k}"])
        query_score = self.composite.score(query).overall_score

        scored = []
        for candidate in pool:
            if candidate.ccn == query.ccn:
                continue
            candidate_score = self.composite.score(candidate).overall_score
            scored.append(
                (self._distance(query, query_score, candidate, candidate_score), candidate.ccn)
            )

        scored.sort()
        logger.debug(f"{query.ccn}: ranked {len(scored)} comparables")

        return SimilarityResult(
            ccn=query.ccn,
            neighbors=[
                SimilarProvider(ccn=ccn, distance=round(dist, 6))
                for dist, ccn in scored[:k]
            ],
        )

    def _distance(
        self,
        a: ProviderRecord,
        score_a: Optional[float],
        b: ProviderRecord,
        score_b: Optional[float],
    ) -> float:
        components = {
            "state": self._categorical(a.state, b.state),
            "county": self._categorical(
                self._county_key(a), self._county_key(b)
            ),
            "adc": self._numeric(a.estimated_adc, b.estimated_adc, self.ADC_SCALE),
            "ownership_type": self._categorical(a.ownership_type, b.ownership_type),
            "score": self._numeric(score_a, score_b, 100.0),
        }
        return sum(self.FEATURE_WEIGHTS[name] * value for name, value in components.items())

    @staticmethod
    def _county_key(record: ProviderRecord) -> Optional[str]:
        # County names repeat across states
        if record.county is None:
            return None
        return f"{record.state or ''}|{record.county}"

    @staticmethod
    def _categorical(a: Optional[str], b: Optional[str]) -> float:
        if a is None and b is None:
            return 0.0
        if a is None or b is None:
            return 0.5
        return 0.0 if a.strip().lower() == b.strip().lower() else 1.0

    @staticmethod
    def _numeric(a: Optional[float], b: Optional[float], scale: float) -> float:
        if a is None and b is None:
            return 0.0
        if a is None or b is None:
            return 0.5
        return min(abs(a - b) / scale, 1.0)
