"""Workout and WorkoutEntry models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_engine.db.base import Base
from workout_engine.schemas.set_record import SetRecord
from workout_engine.services.serialization import decode_sets, encode_sets


class Workout(Base):
    """A workout session. completed_at is None while the workout is active."""

    __tablename__ = "workouts"
    __table_args__ = (
        Index("ix_workouts_started_at", "started_at"),
        Index("ix_workouts_completed_at", "completed_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    effort_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-10
    total_rest_seconds: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_volume: Mapped[float | None] = mapped_column(Float, nullable=True)  # sum(weight * reps)

    entries: Mapped[list["WorkoutEntry"]] = relationship(
        "WorkoutEntry",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutEntry.order",
        lazy="selectin",
    )

    @property
    def is_active(self) -> bool:
        return self.completed_at is None


class WorkoutEntry(Base):
    """One exercise slot in a workout. Its sets live in a single serialized column."""

    __tablename__ = "workout_entries"
    __table_args__ = (Index("ix_workout_entries_workout_id", "workout_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workout_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    exercise_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True, index=True
    )
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sets_data: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON list of SetRecord
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="entries")
    exercise: Mapped["Exercise | None"] = relationship("Exercise", lazy="selectin")

    def get_sets(self) -> list[SetRecord]:
        return decode_sets(self.sets_data)

    def set_sets(self, sets: list[SetRecord]) -> None:
        self.sets_data = encode_sets(sets)
