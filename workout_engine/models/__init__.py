"""ORM models - import all so Base.metadata is complete for migrations."""

from workout_engine.models.exercise import Exercise
from workout_engine.models.personal_record import PersonalRecord
from workout_engine.models.template import TemplateExercise, WorkoutTemplate
from workout_engine.models.workout import Workout, WorkoutEntry

__all__ = [
    "Exercise",
    "PersonalRecord",
    "Workout",
    "WorkoutEntry",
    "WorkoutTemplate",
    "TemplateExercise",
]
