"""
Persistence of decoded statements with SQLAlchemy.
"""

from .models import Base, BalanceRecord, EntryRecord, StatementRecord
from .repository import StatementRepository

__all__ = ["Base", "BalanceRecord", "EntryRecord", "StatementRecord", "StatementRepository"]
