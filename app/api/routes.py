"""API routes for the hospice acquisition scoring engine."""

import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from app.config import settings
from app.errors import InvalidConfigurationError, MalformedRecordError
from app.market import ConsolidationReport, DealPipelineStats, MarketConsolidationAnalyzer
from app.models import (
    CarryBackAnalysis,
    DataQualityResult,
    EvaluationFailure,
    IndustryMultiples,
    ProviderEvaluation,
    ScoringCriteria,
    SimilarityResult,
    ValuationResult,
)
from app.repository import ProviderRepository, SqlProviderRepository
from app.score import (
    CarryBackScorer,
    DataQualityScorer,
    ProviderScorer,
    SimilarityEngine,
    ValuationCalculator,
    parse_record,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_repository: Optional[ProviderRepository] = None


def get_repository() -> ProviderRepository:
    """Repository dependency; overridden in tests."""
    global _repository
    if _repository is None:
        _repository = SqlProviderRepository()
    return _repository


def get_criteria() -> ScoringCriteria:
    try:
        return settings.criteria()
    except InvalidConfigurationError as e:
        logger.error(f"Invalid scoring configuration: {e}")
        raise HTTPException(status_code=500, detail=f"Invalid scoring configuration: {e}")


class EvaluateRequest(BaseModel):
    """Request body for batch evaluation."""
    records: list[dict[str, Any]]
    multiples: Optional[IndustryMultiples] = None
    save: bool = False


class EvaluateResponse(BaseModel):
    """Response for batch evaluation."""
    total: int
    evaluated: int
    failed: int
    results: list[Union[ProviderEvaluation, EvaluationFailure]]


class ValuationRequest(BaseModel):
    """Request body for a valuation."""
    record: dict[str, Any]
    multiples: IndustryMultiples


def _parse(data: dict[str, Any]):
    try:
        return parse_record(data)
    except MalformedRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(
    request: EvaluateRequest,
    criteria: ScoringCriteria = Depends(get_criteria),
    repository: ProviderRepository = Depends(get_repository),
):
    """Score, classify and value a batch of provider records."""
    scorer = ProviderScorer(criteria, request.multiples)
    results = scorer.evaluate_batch(request.records, max_workers=settings.batch_workers)
    evaluations = [r for r in results if isinstance(r, ProviderEvaluation)]

    if request.save and evaluations:
        repository.save_records([e.record for e in evaluations])
        repository.save_results(evaluations)

    return EvaluateResponse(
        total=len(results),
        evaluated=len(evaluations),
        failed=len(results) - len(evaluations),
        results=results,
    )


@router.post("/valuation", response_model=ValuationResult)
async def valuation(request: ValuationRequest):
    """Value a provider with the supplied multiples."""
    record = _parse(request.record)
    return ValuationCalculator(request.multiples).value(record)


@router.post("/carry-back", response_model=CarryBackAnalysis)
async def carry_back(
    record: dict[str, Any],
    criteria: ScoringCriteria = Depends(get_criteria),
):
    """Score owner carry-back suitability for a provider."""
    return CarryBackScorer(criteria).score(_parse(record))


@router.post("/data-quality", response_model=DataQualityResult)
async def data_quality(
    record: dict[str, Any],
    criteria: ScoringCriteria = Depends(get_criteria),
):
    """Report enrichment completeness for a provider."""
    return DataQualityScorer(criteria).score(_parse(record))


@router.get("/providers/{ccn}", response_model=ProviderEvaluation)
async def get_provider(
    ccn: str,
    criteria: ScoringCriteria = Depends(get_criteria),
    repository: ProviderRepository = Depends(get_repository),
):
    """Evaluate a stored provider."""
    record = repository.load(ccn)
    if record is None:
        raise HTTPException(status_code=404, detail="Provider not found")

    return ProviderScorer(criteria, settings.multiples()).evaluate(record)


@router.get("/providers/{ccn}/similar", response_model=SimilarityResult)
async def get_similar(
    ccn: str,
    limit: Optional[int] = Query(default=None, ge=1, le=50),
    criteria: ScoringCriteria = Depends(get_criteria),
    repository: ProviderRepository = Depends(get_repository),
):
    """Nearest comparables for a stored provider."""
    record = repository.load(ccn)
    if record is None:
        raise HTTPException(status_code=404, detail="Provider not found")

    pool = repository.load_candidate_pool(record)
    return SimilarityEngine(criteria).nearest(record, pool, k=limit)


def _stored_evaluations(repository: ProviderRepository) -> list[ProviderEvaluation]:
    evaluations = repository.load_results()
    if not evaluations:
        raise HTTPException(status_code=404, detail="No evaluations stored")
    return evaluations


@router.get("/consolidation", response_model=ConsolidationReport)
async def get_consolidation(repository: ProviderRepository = Depends(get_repository)):
    """State, county and ownership roll-ups over stored evaluations."""
    return MarketConsolidationAnalyzer().analyze(_stored_evaluations(repository))


@router.get("/consolidation/pipeline", response_model=DealPipelineStats)
async def get_pipeline(repository: ProviderRepository = Depends(get_repository)):
    """Acquisition track counts over stored evaluations."""
    return MarketConsolidationAnalyzer().pipeline_stats(_stored_evaluations(repository))


@router.get("/scoring/criteria", response_model=ScoringCriteria)
async def get_scoring_criteria(criteria: ScoringCriteria = Depends(get_criteria)):
    """The thresholds and weights currently in effect."""
    return criteria
