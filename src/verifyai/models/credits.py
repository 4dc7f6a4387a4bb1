"""UserCredits ORM model: per-user analysis credit balance."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import String, func
from sqlalchemy.orm import Mapped, mapped_column

from verifyai.models.base import Base


class UserCredits(Base):
    __tablename__ = "user_credits"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    credits: Mapped[int] = mapped_column(default=0)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "credits": self.credits,
            "updated_at": self.updated_at.isoformat(),
        }
