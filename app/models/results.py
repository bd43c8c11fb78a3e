"""Result models produced by the scoring engine."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .criteria import IndustryMultiples
from .provider import ProviderRecord


class Classification(str, Enum):
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class ConfidenceLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ScoreBreakdown(BaseModel):
    """Sub-scores and the weighted composite for one provider."""

    quality: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    compliance: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    operational: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    market: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    overall_score: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=100.0,
        description="Weighted average of available sub-scores; None if not computable",
    )
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW
    available_count: int = Field(default=0, description="Number of sub-scores computed")


class ClassificationResult(BaseModel):
    """GREEN/YELLOW/RED decision and the signals behind it."""

    classification: Classification
    reasons: list[str] = Field(
        default_factory=list,
        description="Signals that fired, in evaluation order",
    )
    confirming_signals: int = 0
    signals: dict[str, bool] = Field(default_factory=dict)
    unmet: list[str] = Field(
        default_factory=list,
        description="Signals that did not fire (upgrade triggers)",
    )


class CarryBackFactor(BaseModel):
    """One contribution to the carry-back score."""

    name: str
    points: float
    max_points: float
    known: bool = True
    reason: str


class CarryBackAnalysis(BaseModel):
    """Seller-financing suitability for a provider."""

    score: float = Field(ge=0.0, le=100.0)
    likelihood: str = Field(description="HIGH, MEDIUM or LOW")
    factors: list[CarryBackFactor] = Field(default_factory=list)
    unknown_factors: list[str] = Field(default_factory=list)


class ValuationRange(BaseModel):
    low: float
    median: float
    high: float


class ValuationResult(BaseModel):
    """Revenue- and census-based enterprise value ranges."""

    ccn: str
    revenue_based: Optional[ValuationRange] = None
    adc_based: Optional[ValuationRange] = None
    revenue_basis: Optional[str] = Field(
        default=None,
        description="Which revenue field fed revenue_based",
    )
    multiples: IndustryMultiples


class SimilarProvider(BaseModel):
    ccn: str
    distance: float


class SimilarityResult(BaseModel):
    """Nearest comparables for a provider, nearest first."""

    ccn: str
    neighbors: list[SimilarProvider] = Field(default_factory=list)


class DataQualityResult(BaseModel):
    """Completeness of the enrichment fields for a provider."""

    ccn: str
    completeness: float = Field(ge=0.0, le=1.0)
    populated: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    quality_label: str
    needs_review: bool


class ProviderEvaluation(BaseModel):
    """Everything the engine derives from one provider record."""

    record: ProviderRecord
    breakdown: ScoreBreakdown
    classification: ClassificationResult
    carry_back: CarryBackAnalysis
    data_quality: DataQualityResult
    valuation: Optional[ValuationResult] = None

    @property
    def ccn(self) -> str:
        return self.record.ccn


class EvaluationFailure(BaseModel):
    """Marker for a batch record that could not be evaluated."""

    index: int
    ccn: Optional[str] = None
    error: str
