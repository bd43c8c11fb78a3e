"""Hospice provider record model."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OwnershipComplexity(str, Enum):
    """How tangled the ownership structure is."""

    SIMPLE = "SIMPLE"
    MODERATE = "MODERATE"
    COMPLEX = "COMPLEX"


class ProviderRecord(BaseModel):
    """A normalized hospice provider snapshot.

    Every field except ``ccn`` is optional. ``None`` means the value is
    unknown; it is never read as zero or False by the scoring engine.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    # Identity and location
    ccn: str = Field(min_length=1, description="CMS Certification Number")
    provider_name: Optional[str] = None
    state: Optional[str] = Field(default=None, description="Two-letter state code")
    county: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Cost report financials
    total_revenue: Optional[float] = None
    total_expenses: Optional[float] = None
    net_income: Optional[float] = None
    cost_per_day: Optional[float] = None
    total_patient_days: Optional[float] = None
    nonprofit_revenue: Optional[float] = Field(
        default=None, description="Form 990 revenue for nonprofit operators"
    )

    # Operations
    estimated_adc: Optional[float] = Field(default=None, description="Average daily census")

    # Regulatory and quality
    quality_score: Optional[float] = None
    compliance_score: Optional[float] = None
    operational_score: Optional[float] = None
    market_score: Optional[float] = None
    cms_quality_star: Optional[float] = Field(default=None, ge=1, le=5)
    cms_cahps_star: Optional[float] = Field(default=None, ge=1, le=5)
    deficiency_count: Optional[int] = Field(default=None, ge=0)
    complaint_count: Optional[int] = Field(default=None, ge=0)

    # Ownership
    ownership_type: Optional[str] = None
    pe_backed: Optional[bool] = None
    chain_affiliated: Optional[bool] = None
    owner_count: Optional[int] = Field(default=None, ge=0)
    ownership_complexity: Optional[OwnershipComplexity] = None
    recent_ownership_change: Optional[bool] = None

    # Market context
    county_pop_65_plus: Optional[float] = None
    county_pct_65_plus: Optional[float] = None
    county_median_income: Optional[float] = None
    con_state: Optional[bool] = Field(
        default=None, description="State requires a Certificate of Need"
    )

    # Owner carry-back inputs
    owner_age: Optional[int] = None
    years_in_business: Optional[float] = None
    facility_owned: Optional[bool] = None
    lease_years_remaining: Optional[float] = None

    # Enrichment and contact
    website: Optional[str] = None
    phone_number: Optional[str] = None
    administrator_name: Optional[str] = None
    owner_name: Optional[str] = None
    linkedin_url: Optional[str] = None
    npi: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        # CSV exports and nullable columns hand us "" for unknown values
        if isinstance(data, dict):
            return {
                key: (None if isinstance(value, str) and not value.strip() else value)
                for key, value in data.items()
            }
        return data

    @field_validator("ccn", mode="before")
    @classmethod
    def _strip_ccn(cls, value: Any) -> Any:
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("state")
    @classmethod
    def _upper_state(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value else value

    @field_validator("ownership_complexity", mode="before")
    @classmethod
    def _normalize_complexity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def is_independent(self) -> Optional[bool]:
        """Not PE-backed and not chain affiliated; None if either is unknown."""
        if self.pe_backed is None or self.chain_affiliated is None:
            return None
        return not self.pe_backed and not self.chain_affiliated
