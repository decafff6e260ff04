"""FastAPI application factory and lifespan."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workout_engine.api.v1 import api_router
from workout_engine.core.config import Settings, get_settings
from workout_engine.core.exceptions import StoreError
from workout_engine.db.base import Base
from workout_engine.db.session import build_engine, build_session_maker
from workout_engine.db.store import WorkoutStore
from workout_engine.models import *  # noqa: F401, F403 - register all models
from workout_engine.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


def create_application(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: engine, tables, session manager (resuming any unfinished workout)."""
        engine = build_engine(settings)
        if settings.auto_create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        session_maker = build_session_maker(engine)
        manager_session = session_maker()
        manager = SessionManager(
            WorkoutStore(manager_session),
            default_rest_seconds=settings.default_rest_seconds,
            tick_interval=settings.tick_interval_seconds,
            pr_banner_seconds=settings.pr_banner_seconds,
        )
        resumed = await manager.load()
        if resumed is not None:
            logger.info("Resumed unfinished workout %s", resumed.id)

        app.state.session_maker = session_maker
        app.state.session_manager = manager
        app.state.session_lock = asyncio.Lock()
        yield
        await manager.shutdown()
        await manager_session.close()
        await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug; in production use CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        return JSONResponse(
            status_code=503,
            content={"detail": {"code": "store_failed", "message": "Could not reach the workout store"}},
        )

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
