"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mpoly import __version__
from mpoly.api.auth import router as auth_router
from mpoly.api.exception_handlers import setup_exception_handlers
from mpoly.api.health import router as health_router
from mpoly.api.middleware import CorrelationIdMiddleware, DelayMiddleware
from mpoly.api.records import router as records_router
from mpoly.api.users import router as users_router
from mpoly.config import Settings, get_settings
from mpoly.services.auth_service import AuthService
from mpoly.services.logging_service import configure_logging, get_logger
from mpoly.services.record_service import RecordService
from mpoly.services.user_service import UserService
from mpoly.store import Collection, DocumentStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger = get_logger("main")

    if settings.uses_default_secret:
        logger.warning(
            "default_jwt_key_in_use",
            note="Set JWT_SECRET in the environment for any shared deployment",
        )

    store: DocumentStore = app.state.store
    for collection in Collection:
        if not store.exists(collection):
            logger.warning(
                "data_file_missing",
                collection=collection.value,
                path=str(store.path_for(collection)),
                note="Requests touching this collection will fail; run `python -m mpoly seed`",
            )

    logger.info(
        "application_started",
        data_dir=str(store.data_dir),
        api_prefix=settings.api_prefix or "/",
        max_delay_ms=settings.max_delay_ms,
    )

    yield

    logger.info("application_shutdown")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    auth_service: Optional[AuthService] = None,
) -> FastAPI:
    """Build the application and wire its services.

    Args:
        settings: Configuration; read from the environment when omitted
        store: Document store; built from ``settings`` when omitted
        auth_service: Token service; built from ``settings`` when omitted

    Returns:
        Configured FastAPI app with services on ``app.state``
    """
    settings = settings or get_settings()
    store = store or DocumentStore(
        settings.data_dir,
        users_file=settings.users_file,
        records_file=settings.records_file,
    )
    auth_service = auth_service or AuthService(settings, store)

    app = FastAPI(
        title="Mpoly API",
        description="Authenticated, role-scoped record management",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.auth_service = auth_service
    app.state.user_service = UserService(store, auth_service)
    app.state.record_service = RecordService(store)

    setup_exception_handlers(app)

    # Added last-to-first: correlation id wraps the delay, CORS wraps both.
    app.add_middleware(DelayMiddleware, max_delay_ms=settings.max_delay_ms)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    prefix = settings.api_prefix.rstrip("/")
    app.include_router(auth_router, prefix=prefix)
    app.include_router(users_router, prefix=prefix)
    app.include_router(records_router, prefix=prefix)
    app.include_router(health_router, prefix=prefix)

    return app


app = create_app()
