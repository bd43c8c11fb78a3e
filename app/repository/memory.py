"""In-memory repository for tests and demos."""

from typing import Optional

from app.models import ProviderEvaluation, ProviderRecord
from .base import ProviderRepository


class InMemoryProviderRepository(ProviderRepository):
    """Repository backed by plain dictionaries."""

    name = "memory"

    def __init__(self, records: Optional[list[ProviderRecord]] = None):
        self._records: dict[str, ProviderRecord] = {}
        self._results: dict[str, ProviderEvaluation] = {}
        if records:
            self.save_records(records)

    def load(self, ccn: str) -> Optional[ProviderRecord]:
        return self._records.get(ccn)

    def load_candidate_pool(self, record: ProviderRecord) -> list[ProviderRecord]:
        """Same-state providers when the state is known, otherwise everyone."""
        if record.state:
            return [r for r in self._records.values() if r.state == record.state]
        return list(self._records.values())

    def load_all(self) -> list[ProviderRecord]:
        return [self._records[ccn] for ccn in sorted(self._records)]

    def save_records(self, records: list[ProviderRecord]) -> int:
        for record in records:
            self._records[record.ccn] = record
        return len(records)

    def save_results(self, evaluations: list[ProviderEvaluation]) -> int:
        for evaluation in evaluations:
            self._results[evaluation.ccn] = evaluation
        return len(evaluations)

    def load_results(self) -> list[ProviderEvaluation]:
        return [self._results[ccn] for ccn in sorted(self._results)]
