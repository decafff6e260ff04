"""Shared fixtures: temp SQLite database, controllable clock, recording feedback."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from workout_engine.core.config import Settings
from workout_engine.db.base import Base
from workout_engine.db.session import build_engine, build_session_maker
from workout_engine.db.store import WorkoutStore
from workout_engine.models import Exercise, TemplateExercise, WorkoutTemplate
from workout_engine.services.session_manager import SessionManager

START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Wall clock the tests move by hand."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingFeedback:
    def __init__(self):
        self.haptics = []
        self.sounds = []

    def haptic(self, kind):
        self.haptics.append(kind)

    def play_sound(self, name):
        self.sounds.append(name)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        tick_interval_seconds=60,
        pr_banner_seconds=60,
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    async with build_session_maker(engine)() as session:
        yield session


@pytest.fixture
def store(db):
    return WorkoutStore(db)


@pytest_asyncio.fixture
async def manager(store, clock, feedback):
    manager = SessionManager(store, default_rest_seconds=90, tick_interval=60, clock=clock, feedback=feedback)
    yield manager
    await manager.shutdown()


@pytest_asyncio.fixture
async def bench(store):
    exercise = store.create(Exercise(name="Bench Press"))
    await store.save()
    return exercise


@pytest_asyncio.fixture
async def squat(store):
    exercise = store.create(Exercise(name="Back Squat"))
    await store.save()
    return exercise


@pytest_asyncio.fixture
async def push_day(store, bench, squat):
    template = WorkoutTemplate(name="Push Day")
    template.exercises.append(
        TemplateExercise(exercise=bench, order=0, default_sets=3, default_reps=5, default_weight=135.0)
    )
    template.exercises.append(TemplateExercise(exercise=squat, order=1, default_sets=2, default_reps=8))
    store.create(template)
    await store.save()
    return template
