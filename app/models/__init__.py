"""Data models for hospice acquisition scoring."""

from .provider import OwnershipComplexity, ProviderRecord
from .criteria import (
    IndustryMultiples,
    MultipleRange,
    ScoreWeights,
    ScoringCriteria,
)
from .results import (
    CarryBackAnalysis,
    CarryBackFactor,
    Classification,
    ClassificationResult,
    ConfidenceLevel,
    DataQualityResult,
    EvaluationFailure,
    ProviderEvaluation,
    ScoreBreakdown,
    SimilarityResult,
    SimilarProvider,
    ValuationRange,
    ValuationResult,
)

__all__ = [
    "OwnershipComplexity",
    "ProviderRecord",
    "IndustryMultiples",
    "MultipleRange",
    "ScoreWeights",
    "ScoringCriteria",
    "CarryBackAnalysis",
    "CarryBackFactor",
    "Classification",
    "ClassificationResult",
    "ConfidenceLevel",
    "DataQualityResult",
    "EvaluationFailure",
    "ProviderEvaluation",
    "ScoreBreakdown",
    "SimilarityResult",
    "SimilarProvider",
    "ValuationRange",
    "ValuationResult",
]
