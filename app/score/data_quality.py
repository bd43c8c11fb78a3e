"""Data completeness scoring for diligence triage."""

from typing import Optional

from app.models import DataQualityResult, ProviderRecord, ScoringCriteria


class DataQualityScorer:
    """Measure how much enrichment data a record carries."""

    ENRICHMENT_FIELDS = (
        "website",
        "phone_number",
        "administrator_name",
        "owner_name",
        "linkedin_url",
        "npi",
        "owner_age",
        "years_in_business",
        "facility_owned",
        "lease_years_remaining",
        "total_revenue",
        "estimated_adc",
        "latitude",
        "longitude",
    )

    def __init__(self, criteria: Optional[ScoringCriteria] = None):
        self.criteria = criteria or ScoringCriteria()

    def score(self, record: ProviderRecord) -> DataQualityResult:
        populated = [f for f in self.ENRICHMENT_FIELDS if getattr(record, f) is not None]
        missing = [f for f in self.ENRICHMENT_FIELDS if getattr(record, f) is None]
        completeness = len(populated) / len(self.ENRICHMENT_FIELDS)

        if completeness >= 0.75:
            label = "HIGH"
        elif completeness >= 0.4:
            label = "MEDIUM"
        else:
            label = "LOW"

        return DataQualityResult(
            ccn=record.ccn,
            completeness=round(completeness, 4),
            populated=populated,
            missing=missing,
            quality_label=label,
            needs_review=completeness < self.criteria.review_threshold,
        )
