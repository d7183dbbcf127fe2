# backend/main.py
"""
Main application file for the Hangman+ API.
Builds the FastAPI app around one SQLite database and one in-memory game
registry, maps service error kinds to HTTP responses, wires routers, and
exposes a simple /healthz endpoint.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.database import build_engine, build_session_factory, init_db
from core.errors import AppError, ErrorKind, StorageError
from routers import auth, cards, game, profile, stats
from services import auth_service
from services.game_store import GameStore
from utils.config import Settings, load_settings

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.STORAGE: 500,
}


def _seed_admin(app: FastAPI, settings: Settings) -> None:
    if not settings.seeds_admin:
        return
    with app.state.session_factory() as db:
        auth_service.ensure_admin(
            db,
            first_name="Admin",
            last_name="Admin",
            username=settings.seed_admin_username,
            email=settings.seed_admin_email,
            password=settings.seed_admin_password,
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    engine = build_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout_secs,
    )
    games = GameStore(ttl_secs=settings.game_ttl_secs, lock_timeout=settings.game_lock_timeout_secs)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables (idempotent) and apply additive column changes
        init_db(engine)
        _seed_admin(app, settings)
        games.start_sweeper(settings.game_sweep_interval_secs)
        logger.info("[App] ready, database=%s", settings.database_url)
        yield
        games.stop_sweeper()
        engine.dispose()

    app = FastAPI(
        title="Hangman+ API",
        description="Session auth, card moderation and shuffled-deck game runs for the Hangman+ desktop app.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.games = games

    # Allow the desktop shell / Vite dev server origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        if status_code >= 500:
            logger.error("[App] %s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("[App] %s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("[App] database error on %s %s", request.method, request.url.path, exc_info=exc)
        err = StorageError(f"DB error: {exc}")
        return JSONResponse(status_code=500, content=err.to_dict())

    # Routers
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(profile.router, prefix="/profile", tags=["profile"])
    app.include_router(cards.router, prefix="/cards", tags=["cards"])
    app.include_router(game.router, prefix="/game", tags=["game"])
    app.include_router(stats.router, prefix="/stats", tags=["stats"])

    # Health for dev/proxy checks
    @app.get("/healthz")
    async def healthz():
        return {"ok": True, "games": games.count()}

    return app


def _configure_logging() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_configure_logging()
app = create_app()
