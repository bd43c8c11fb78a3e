"""Scoring criteria and industry multiples."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.errors import InvalidConfigurationError

SUBSCORE_NAMES = ("quality", "compliance", "operational", "market")


class ScoreWeights(BaseModel):
    """Relative weight of each sub-score in the composite."""

    quality: float = 25.0
    compliance: float = 25.0
    operational: float = 25.0
    market: float = 25.0

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in SUBSCORE_NAMES}


class ScoringCriteria(BaseModel):
    """Thresholds and weights for scoring and classification."""

    # Size band
    adc_floor: float = Field(default=0.0, description="Lowest ADC counted as in range")
    adc_ceiling: float = Field(default=60.0, description="Highest ADC counted as in range")
    adc_stretch_factor: float = Field(
        default=100.0 / 60.0,
        description="ADC above ceiling*factor scores as far out of range",
    )

    # Classification thresholds
    min_quality_score: float = 70.0
    min_compliance_score: float = 70.0
    green_min_signals: int = 3
    yellow_min_signals: int = 1
    max_owner_count: int = Field(
        default=3, description="Owner counts below this are simple ownership"
    )

    # Composite
    weights: ScoreWeights = Field(default_factory=ScoreWeights)

    # Carry-back
    retirement_age_min: int = 60
    retirement_age_max: int = 75

    # Comparables and diligence
    similarity_k: int = 5
    review_threshold: float = Field(
        default=0.5, description="Completeness below this needs manual diligence"
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "ScoringCriteria":
        problems = []

        for name in ("min_quality_score", "min_compliance_score"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                problems.append(f"{name} must be within [0, 100], got {value}")

        if self.adc_floor < 0:
            problems.append(f"adc_floor must be non-negative, got {self.adc_floor}")
        if self.adc_ceiling < self.adc_floor:
            problems.append(
                f"adc_ceiling {self.adc_ceiling} is below adc_floor {self.adc_floor}"
            )
        if self.adc_stretch_factor < 1:
            problems.append(
                f"adc_stretch_factor must be at least 1, got {self.adc_stretch_factor}"
            )

        if self.yellow_min_signals < 0:
            problems.append("yellow_min_signals must be non-negative")
        if self.green_min_signals < self.yellow_min_signals:
            problems.append(
                f"green_min_signals {self.green_min_signals} is below "
                f"yellow_min_signals {self.yellow_min_signals}"
            )
        if self.max_owner_count < 1:
            problems.append("max_owner_count must be at least 1")

        weights = self.weights.as_dict()
        negative = [name for name, weight in weights.items() if weight < 0]
        if negative:
            problems.append(f"Negative weights: {', '.join(negative)}")
        elif sum(weights.values()) == 0:
            problems.append("At least one sub-score weight must be positive")

        if self.retirement_age_max < self.retirement_age_min:
            problems.append("retirement_age_max is below retirement_age_min")
        if self.similarity_k < 1:
            problems.append("similarity_k must be at least 1")
        if not 0 <= self.review_threshold <= 1:
            problems.append("review_threshold must be within [0, 1]")

        if problems:
            raise InvalidConfigurationError(problems)
        return self


class MultipleRange(BaseModel):
    """Low / median / high tiers of a market multiple."""

    low: float
    median: float
    high: float


class IndustryMultiples(BaseModel):
    """Market multiples supplied from recent transaction data."""

    revenue_multiple: Optional[MultipleRange] = Field(
        default=None, description="Enterprise value / revenue"
    )
    per_adc_value: Optional[MultipleRange] = Field(
        default=None, description="Enterprise value per ADC patient"
    )

    @model_validator(mode="after")
    def _check_tiers(self) -> "IndustryMultiples":
        problems = []
        for name in ("revenue_multiple", "per_adc_value"):
            tiers: Optional[MultipleRange] = getattr(self, name)
            if tiers is None:
                continue
            if min(tiers.low, tiers.median, tiers.high) < 0:
                problems.append(f"{name} tiers must be non-negative")
            elif not tiers.low <= tiers.median <= tiers.high:
                problems.append(f"{name} tiers must satisfy low <= median <= high")
        if problems:
            raise InvalidConfigurationError(problems)
        return self
