"""Per-provider scoring pipeline and batch evaluation."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from app.errors import MalformedRecordError
from app.models import (
    Classification,
    EvaluationFailure,
    IndustryMultiples,
    ProviderEvaluation,
    ProviderRecord,
    ScoringCriteria,
)
from .carryback import CarryBackScorer
from .classifier import ClassificationEngine
from .composite import CompositeScorer
from .data_quality import DataQualityScorer
from .valuation import ValuationCalculator

logger = logging.getLogger(__name__)

RecordInput = Union[ProviderRecord, Mapping[str, Any]]

CLASSIFICATION_ORDER = {
    Classification.GREEN: 0,
    Classification.YELLOW: 1,
    Classification.RED: 2,
}


def parse_record(data: RecordInput) -> ProviderRecord:
    """Turn a mapping of named fields into a ProviderRecord.

    Raises MalformedRecordError when the CCN is missing or the record
    cannot be parsed.
    """
    if isinstance(data, ProviderRecord):
        return data

    raw_ccn = data.get("ccn") if isinstance(data, Mapping) else None
    ccn = str(raw_ccn).strip() if raw_ccn is not None else ""
    if not ccn:
        raise MalformedRecordError("Provider record has no CCN")

    try:
        return ProviderRecord.model_validate(dict(data))
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise MalformedRecordError(
            f"Provider {ccn} has invalid fields: {fields}", ccn=ccn
        ) from e


class ProviderScorer:
    """Run the full scoring pipeline for provider records."""

    def __init__(
        self,
        criteria: Optional[ScoringCriteria] = None,
        multiples: Optional[IndustryMultiples] = None,
    ):
        self.criteria = criteria or ScoringCriteria()
        self.composite = CompositeScorer(self.criteria)
        self.classifier = ClassificationEngine(self.criteria)
        self.carry_back = CarryBackScorer(self.criteria)
        self.data_quality = DataQualityScorer(self.criteria)
        self.valuation = ValuationCalculator(multiples) if multiples else None

    def evaluate(self, data: RecordInput) -> ProviderEvaluation:
        """Score, classify and value a single provider."""
        record = parse_record(data)

        breakdown = self.composite.score(record)
        classification = self.classifier.classify(record, breakdown)

        return ProviderEvaluation(
            record=record,
            breakdown=breakdown,
            classification=classification,
            carry_back=self.carry_back.score(record),
            data_quality=self.data_quality.score(record),
            valuation=self.valuation.value(record) if self.valuation else None,
        )

    def evaluate_batch(
        self,
        records: Iterable[RecordInput],
        max_workers: int = 1,
    ) -> list[Union[ProviderEvaluation, EvaluationFailure]]:
        """Evaluate many records; a bad record yields a failure marker in its slot."""
        items = list(records)

        if max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                results = list(pool.map(self._evaluate_slot, range(len(items)), items))
        else:
            results = [self._evaluate_slot(i, item) for i, item in enumerate(items)]

        failures = sum(1 for r in results if isinstance(r, EvaluationFailure))
        logger.info(f"Evaluated {len(results) - failures} providers, {failures} rejected")
        return results

    def _evaluate_slot(
        self,
        index: int,
        data: RecordInput,
    ) -> Union[ProviderEvaluation, EvaluationFailure]:
        try:
            return self.evaluate(data)
        except MalformedRecordError as e:
            logger.warning(f"Skipping record {index}: {e}")
            return EvaluationFailure(index=index, ccn=e.ccn, error=str(e))

    def evaluate_and_rank(
        self,
        records: Iterable[RecordInput],
        max_workers: int = 1,
    ) -> tuple[list[ProviderEvaluation], list[EvaluationFailure]]:
        """Evaluate a batch and rank successes GREEN first, then by overall score."""
        results = self.evaluate_batch(records, max_workers=max_workers)
        evaluations = [r for r in results if isinstance(r, ProviderEvaluation)]
        failures = [r for r in results if isinstance(r, EvaluationFailure)]
        return rank_evaluations(evaluations), failures


def rank_evaluations(evaluations: list[ProviderEvaluation]) -> list[ProviderEvaluation]:
    """Order by classification, then overall score descending, then CCN."""
    def sort_key(e: ProviderEvaluation):
        score = e.breakdown.overall_score
        return (
            CLASSIFICATION_ORDER[e.classification.classification],
            score is None,
            -(score or 0.0),
            e.ccn,
        )

    return sorted(evaluations, key=sort_key)
