"""Valuation ranges from industry multiples."""

import logging
from typing import Optional

from app.models import (
    IndustryMultiples,
    MultipleRange,
    ProviderRecord,
    ValuationRange,
    ValuationResult,
)

logger = logging.getLogger(__name__)


class ValuationCalculator:
    """Apply market multiples to a provider's revenue and census."""

    def __init__(self, multiples: IndustryMultiples):
        self.multiples = multiples

    def value(self, record: ProviderRecord) -> ValuationResult:
        """Compute revenue- and ADC-based ranges; unknown inputs give None."""
        revenue, basis = self._revenue(record)

        revenue_based = None
        if revenue is not None and self.multiples.revenue_multiple is not None:
            revenue_based = self._apply(revenue, self.multiples.revenue_multiple)

        adc_based = None
        if record.estimated_adc is not None and self.multiples.per_adc_value is not None:
            adc_based = self._apply(record.estimated_adc, self.multiples.per_adc_value)

        if revenue_based is None and adc_based is None:
            logger.debug(f"{record.ccn}: no valuation component computable")

        return ValuationResult(
            ccn=record.ccn,
            revenue_based=revenue_based,
            adc_based=adc_based,
            revenue_basis=basis,
            multiples=self.multiples,
        )

    @staticmethod
    def _revenue(record: ProviderRecord) -> tuple[Optional[float], Optional[str]]:
        """Cost report revenue, falling back to Form 990 revenue."""
        if record.total_revenue is not None:
            return record.total_revenue, "total_revenue"
        if record.nonprofit_revenue is not None:
            return record.nonprofit_revenue, "nonprofit_revenue"
        return None, None

    @staticmethod
    def _apply(base: float, tiers: MultipleRange) -> ValuationRange:
        return ValuationRange(
            low=base * tiers.low,
            median=base * tiers.median,
            high=base * tiers.high,
        )
