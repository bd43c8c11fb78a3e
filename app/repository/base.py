"""Abstract base class for provider repositories."""

from abc import ABC, abstractmethod
from typing import Optional

from app.models import ProviderEvaluation, ProviderRecord


class ProviderRepository(ABC):
    """Storage the scoring engine's callers load records from and save results to."""

    name: str = "base"

    @abstractmethod
    def load(self, ccn: str) -> Optional[ProviderRecord]:
        """
        Load a single provider by CCN.

        Args:
            ccn: CMS Certification Number

        Returns:
            The provider record, or None if it is not stored
        """
        pass

    @abstractmethod
    def load_candidate_pool(self, record: ProviderRecord) -> list[ProviderRecord]:
        """
        Load candidate comparables for a provider.

        Args:
            record: The provider comparables are wanted for

        Returns:
            Candidate records (may include the provider itself)
        """
        pass

    @abstractmethod
    def load_all(self) -> list[ProviderRecord]:
        """Load every stored provider."""
        pass

    @abstractmethod
    def save_records(self, records: list[ProviderRecord]) -> int:
        """Insert or replace provider records, returning how many were written."""
        pass

    @abstractmethod
    def save_results(self, evaluations: list[ProviderEvaluation]) -> int:
        """Store evaluations, replacing earlier results for the same CCN."""
        pass

    @abstractmethod
    def load_results(self) -> list[ProviderEvaluation]:
        """Load every stored evaluation."""
        pass
