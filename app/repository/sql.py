"""SQLAlchemy-backed provider repository."""

import json
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import sessionmaker

from app.models import ProviderEvaluation, ProviderRecord
from app.models.database import DBEvaluation, DBProvider, init_db
from .base import ProviderRepository

logger = logging.getLogger(__name__)


class SqlProviderRepository(ProviderRepository):
    """Repository storing providers and evaluations in a SQL database."""

    name = "sql"

    def __init__(self, session_factory: Optional[sessionmaker] = None, db_url: Optional[str] = None):
        self.SessionLocal = session_factory or init_db(db_url)

    def load(self, ccn: str) -> Optional[ProviderRecord]:
        session = self.SessionLocal()
        try:
            row = session.query(DBProvider).filter_by(ccn=ccn).first()
            return ProviderRecord.model_validate(row.get_record()) if row else None
        finally:
            session.close()

    def load_candidate_pool(self, record: ProviderRecord) -> list[ProviderRecord]:
        """Same-state providers when the state is known, otherwise everyone."""
        session = self.SessionLocal()
        try:
            query = session.query(DBProvider)
            if record.state:
                query = query.filter_by(state=record.state)
            rows = query.order_by(DBProvider.ccn).all()
            return [ProviderRecord.model_validate(row.get_record()) for row in rows]
        finally:
            session.close()

    def load_all(self) -> list[ProviderRecord]:
        session = self.SessionLocal()
        try:
            rows = session.query(DBProvider).order_by(DBProvider.ccn).all()
            return [ProviderRecord.model_validate(row.get_record()) for row in rows]
        finally:
            session.close()

    def save_records(self, records: list[ProviderRecord]) -> int:
        session = self.SessionLocal()
        try:
            for record in records:
                row = session.query(DBProvider).filter_by(ccn=record.ccn).first()
                if row is None:
                    row = DBProvider(ccn=record.ccn)
                    session.add(row)
                row.provider_name = record.provider_name
                row.state = record.state
                row.county = record.county
                row.city = record.city
                row.estimated_adc = record.estimated_adc
                row.con_state = record.con_state
                row.pe_backed = record.pe_backed
                row.record = record.model_dump_json()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        logger.info(f"Saved {len(records)} provider records")
        return len(records)

    def save_results(self, evaluations: list[ProviderEvaluation]) -> int:
        session = self.SessionLocal()
        try:
            for evaluation in evaluations:
                row = session.query(DBEvaluation).filter_by(ccn=evaluation.ccn).first()
                if row is None:
                    row = DBEvaluation(ccn=evaluation.ccn)
                    session.add(row)
                row.overall_score = evaluation.breakdown.overall_score
                row.classification = evaluation.classification.classification.value
                row.confidence_level = evaluation.breakdown.confidence_level.value
                row.confirming_signals = evaluation.classification.confirming_signals
                row.classification_reasons = json.dumps(evaluation.classification.reasons)
                row.carry_back_score = evaluation.carry_back.score
                row.data_completeness = evaluation.data_quality.completeness
                row.evaluation = evaluation.model_dump_json()
                row.scored_at = datetime.utcnow()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        logger.info(f"Saved {len(evaluations)} evaluations")
        return len(evaluations)

    def load_results(self) -> list[ProviderEvaluation]:
        session = self.SessionLocal()
        try:
            rows = session.query(DBEvaluation).order_by(DBEvaluation.ccn).all()
            return [ProviderEvaluation.model_validate_json(row.evaluation) for row in rows]
        finally:
            session.close()
