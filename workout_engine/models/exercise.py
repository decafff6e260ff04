"""Exercise model - library entry referenced by workout entries, templates and PRs."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Enum, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from workout_engine.core.enums import ExerciseCategory
from workout_engine.db.base import Base
from workout_engine.schemas.set_record import ExerciseInstructions
from workout_engine.services.serialization import decode_instructions, encode_instructions


class Exercise(Base):
    """Exercise definition. Instructions are kept as one JSON blob column."""

    __tablename__ = "exercises"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    category: Mapped[ExerciseCategory] = mapped_column(
        Enum(ExerciseCategory), default=ExerciseCategory.OTHER, nullable=False
    )
    is_custom: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructions_data: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def instructions(self) -> ExerciseInstructions:
        return decode_instructions(self.instructions_data)

    @instructions.setter
    def instructions(self, value: ExerciseInstructions) -> None:
        self.instructions_data = encode_instructions(value)
