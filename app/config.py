"""Configuration settings for the hospice acquisition scoring engine."""

import json
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from app.models import IndustryMultiples, ScoreWeights, ScoringCriteria
from app.models.criteria import SUBSCORE_NAMES

CRITERIA_OVERRIDES = (
    "adc_floor",
    "adc_ceiling",
    "adc_stretch_factor",
    "min_quality_score",
    "min_compliance_score",
    "green_min_signals",
    "yellow_min_signals",
    "max_owner_count",
    "retirement_age_min",
    "retirement_age_max",
    "similarity_k",
    "review_threshold",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    data_dir: Path = base_dir / "data"
    db_path: Path = data_dir / "hospice_targets.db"
    industry_multiples_path: Optional[Path] = None

    # Batch settings
    batch_workers: int = 4
    default_output_name: str = "ranked_providers.csv"

    # Scoring overrides (unset values fall back to ScoringCriteria defaults)
    adc_floor: Optional[float] = None
    adc_ceiling: Optional[float] = None
    adc_stretch_factor: Optional[float] = None
    min_quality_score: Optional[float] = None
    min_compliance_score: Optional[float] = None
    green_min_signals: Optional[int] = None
    yellow_min_signals: Optional[int] = None
    max_owner_count: Optional[int] = None
    retirement_age_min: Optional[int] = None
    retirement_age_max: Optional[int] = None
    similarity_k: Optional[int] = None
    review_threshold: Optional[float] = None

    # Sub-score weight overrides
    weight_quality: Optional[float] = None
    weight_compliance: Optional[float] = None
    weight_operational: Optional[float] = None
    weight_market: Optional[float] = None

    # Database URL
    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    def criteria(self) -> ScoringCriteria:
        """Build validated scoring criteria from the configured overrides.

        Raises InvalidConfigurationError if an override is out of range.
        """
        overrides = {
            name: getattr(self, name)
            for name in CRITERIA_OVERRIDES
            if getattr(self, name) is not None
        }

        weights = {
            name: getattr(self, f"weight_{name}")
            for name in SUBSCORE_NAMES
            if getattr(self, f"weight_{name}") is not None
        }
        if weights:
            overrides["weights"] = ScoreWeights(**weights)

        return ScoringCriteria(**overrides)

    def multiples(self) -> Optional[IndustryMultiples]:
        """Load the industry multiples table, if one is configured."""
        if not self.industry_multiples_path:
            return None
        return load_multiples(self.industry_multiples_path)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def load_multiples(path: Path) -> IndustryMultiples:
    """Load an industry multiples table from JSON."""
    with open(path, "r") as f:
        data = json.load(f)
    return IndustryMultiples(**data)


settings = Settings()

# Ensure data directory exists
settings.data_dir.mkdir(parents=True, exist_ok=True)
