"""
Database configuration and models.
"""

from fincalc.db.database import engine, SessionLocal, get_db
from fincalc.db.models import Base

__all__ = ["engine", "SessionLocal", "get_db", "Base"]
