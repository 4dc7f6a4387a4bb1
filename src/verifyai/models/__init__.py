"""SQLAlchemy ORM models."""

from verifyai.models.analysis import AnalysisRecord
from verifyai.models.base import Base
from verifyai.models.credits import UserCredits

__all__ = [
    "AnalysisRecord",
    "Base",
    "UserCredits",
]
