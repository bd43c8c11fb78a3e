"""SQLAlchemy database models and setup."""

import json
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings

Base = declarative_base()


class DBProvider(Base):
    """Stored provider snapshot.

    Queryable columns are broken out; the full record is kept as JSON so
    that fields added to ProviderRecord need no migration.
    """

    __tablename__ = "hospice_providers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ccn = Column(String(20), unique=True, nullable=False, index=True)
    provider_name = Column(String(500))
    state = Column(String(2))
    county = Column(String(200))
    city = Column(String(200))
    estimated_adc = Column(Float)
    con_state = Column(Boolean)
    pe_backed = Column(Boolean)
    record = Column(Text, nullable=False)  # JSON
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_provider_state", "state"),
        Index("idx_provider_state_county", "state", "county"),
    )

    def get_record(self) -> dict:
        return json.loads(self.record)


class DBEvaluation(Base):
    """Latest scoring output for a provider."""

    __tablename__ = "provider_evaluations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ccn = Column(String(20), unique=True, nullable=False, index=True)

    overall_score = Column(Float)
    classification = Column(String(10), nullable=False)
    confidence_level = Column(String(10))
    confirming_signals = Column(Integer, default=0)
    classification_reasons = Column(Text)  # JSON array
    carry_back_score = Column(Float)
    data_completeness = Column(Float)

    evaluation = Column(Text, nullable=False)  # JSON of ProviderEvaluation
    scored_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_evaluation_classification", "classification"),
        Index("idx_evaluation_score", "overall_score"),
    )


# Database initialization
def init_db(db_url: Optional[str] = None) -> sessionmaker:
    """Initialize database and return session maker."""
    url = db_url or settings.database_url
    if url == "sqlite://":
        # In-memory databases must share one connection across sessions
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
