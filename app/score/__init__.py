"""Scoring engine for hospice acquisition targets."""

from .scorer import ProviderScorer, parse_record, rank_evaluations
from .composite import CompositeScorer
from .classifier import ClassificationEngine
from .carryback import CarryBackScorer
from .valuation import ValuationCalculator
from .similarity import SimilarityEngine
from .data_quality import DataQualityScorer

__all__ = [
    "ProviderScorer",
    "parse_record",
    "rank_evaluations",
    "CompositeScorer",
    "ClassificationEngine",
    "CarryBackScorer",
    "ValuationCalculator",
    "SimilarityEngine",
    "DataQualityScorer",
]
