"""AnalysisRecord ORM model: one persisted forensic report."""

import json
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Float, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from verifyai.constants import AnalysisContext
from verifyai.models.base import Base


class AnalysisRecord(Base):
    __tablename__ = "analyses"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(64))
    input_text: Mapped[str] = mapped_column(Text)
    context: Mapped[str] = mapped_column(
        String(20), default=AnalysisContext.GENERAL
    )
    report_json: Mapped[str] = mapped_column(Text)
    score: Mapped[float] = mapped_column(Float)
    verdict: Mapped[str] = mapped_column(String(64))
    used_fallback: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_analyses_user_created", "user_id", "created_at"),
    )

    def to_dict(self, *, include_report: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "user_id": self.user_id,
            "input_text": self.input_text,
            "context": self.context,
            "score": self.score,
            "verdict": self.verdict,
            "used_fallback": self.used_fallback,
            "created_at": self.created_at.isoformat(),
        }
        if include_report:
            data["report"] = json.loads(self.report_json)
        return data
