"""PersonalRecord model - append-only PR history per exercise."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_engine.db.base import Base


class PersonalRecord(Base):
    """A heaviest-weight record. Never updated; a new PR is a new row."""

    __tablename__ = "personal_records"
    __table_args__ = (Index("ix_personal_records_exercise_weight", "exercise_id", "weight"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    exercise_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True
    )
    workout_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True
    )
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    achieved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )

    exercise: Mapped["Exercise | None"] = relationship("Exercise", lazy="selectin")
