"""Assessment model: one persisted triage submission.

Rows are written once per submission and never updated. The priority label is
not stored; it is recomputed from ``diagnosis`` whenever a row is displayed.
"""
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from triagex.db.session import Base
from triagex.models.user import uuid_col_type
from triagex.utils.encryption import EncryptedJSON


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Assessment(Base):
    __tablename__ = "assessments"
    __table_args__ = (
        Index("ix_assessments_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        uuid_col_type(),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        uuid_col_type(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Symptom reports exactly as submitted (strings or objects), encrypted at rest
    symptoms: Mapped[Any] = mapped_column(EncryptedJSON, nullable=False)
    diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    user: Mapped["User"] = relationship("User", back_populates="assessments")
