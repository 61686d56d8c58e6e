"""
SQLAlchemy ORM models for saved analyses.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    DateTime,
    JSON,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base
import uuid
import enum


class AnalysisKind(str, enum.Enum):
    """Calculator a saved analysis belongs to."""
    investment_property = "property"
    buyd = "buyd"
    debt = "debt"


Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class SavedAnalysis(Base):
    """A saved calculator run: its inputs and terminal summary."""

    __tablename__ = "analyses"

    id = Column(String, primary_key=True, default=generate_uuid)
    kind = Column(SQLEnum(AnalysisKind), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)

    # Raw calculator inputs, replayable through the engines
    inputs = Column(JSON, default=dict, nullable=False)

    # Final-period metrics only; list views never need the full series
    summary = Column(JSON, default=dict, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
