"""Market-level analytics over classified providers."""

from .consolidation import (
    ConsolidationAccumulator,
    ConsolidationReport,
    DealPipelineStats,
    GroupStats,
    MarketConsolidationAnalyzer,
)

__all__ = [
    "ConsolidationAccumulator",
    "ConsolidationReport",
    "DealPipelineStats",
    "GroupStats",
    "MarketConsolidationAnalyzer",
]
