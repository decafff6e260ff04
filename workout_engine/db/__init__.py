"""Database package: engine, session factory, store."""

from workout_engine.db.session import build_engine, build_session_maker
from workout_engine.db.store import WorkoutStore

__all__ = ["build_engine", "build_session_maker", "WorkoutStore"]
