from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from golftrack.api.errors import register_error_handlers
from golftrack.api.v1.courses import router as courses_router
from golftrack.api.v1.hole_scores import router as hole_scores_router
from golftrack.api.v1.players import router as players_router
from golftrack.api.v1.rounds import router as rounds_router
from golftrack.api.v1.shots import router as shots_router
from golftrack.core.logging import configure_logging
from golftrack.core.settings import Settings, settings
from golftrack.db.session import create_db_engine, create_session_factory


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(app_settings.LOG_LEVEL)
        engine = create_db_engine(app_settings.DATABASE_URL)
        app.state.session_factory = create_session_factory(engine)
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(title=app_settings.PROJECT_NAME, lifespan=lifespan)

    # Local dev: allow the Expo web dev server to call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:8081", "http://127.0.0.1:8081"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(
        courses_router,
        prefix=app_settings.API_V1_STR,
        tags=["Courses"],
    )
    app.include_router(
        players_router,
        prefix=app_settings.API_V1_STR,
        tags=["Players"],
    )
    app.include_router(
        rounds_router,
        prefix=app_settings.API_V1_STR,
        tags=["Rounds"],
    )
    app.include_router(
        hole_scores_router,
        prefix=app_settings.API_V1_STR,
        tags=["Hole scores"],
    )
    app.include_router(
        shots_router,
        prefix=app_settings.API_V1_STR,
        tags=["Shots"],
    )
    return app


app = create_app()
