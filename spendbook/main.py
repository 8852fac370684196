import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.store import FileStorage
from .services.ledger import Ledger
from .services.rates.providers import make_rate_provider
from .routers import categories, expenses, rates, summary, transfer, view

logger = logging.getLogger("spendbook")


def build_ledger(settings: Settings) -> Ledger:
    storage = FileStorage(settings.data_dir)
    if settings.exchange_rate_provider == "nbp":
        provider = make_rate_provider(
            "nbp",
            url=str(settings.nbp_api_url),
            timeout=settings.http_timeout_seconds,
        )
    else:
        provider = make_rate_provider(settings.exchange_rate_provider)
    ledger = Ledger(storage, settings.state_key, provider)
    # Conversions must work from the first request, before any fetch succeeds.
    ledger.ensure_rates()
    return ledger


def create_app(
    settings_override: Settings | None = None, ledger: Ledger | None = None
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp data dir). Falls back to cached get_settings().
    ledger: pass a prebuilt Ledger (e.g. over MemoryStorage) to skip file storage.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug, app_name=settings.app_name)

    if ledger is None:
        try:
            ledger = build_ledger(settings)
        except Exception:
            logger.exception("failed to initialise ledger storage on startup")
            raise

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.refresh_rates_on_startup:
            result = app.state.ledger.refresh_rates()
            if not result.ok:
                logger.warning("startup rate refresh failed: %s", result.error)
        yield

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.ledger = ledger

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(expenses.router)
    app.include_router(categories.router)
    app.include_router(view.router)
    app.include_router(rates.router)
    app.include_router(summary.router)
    app.include_router(transfer.router)

    @app.get("/")
    async def root():
        return {"message": "Spendbook API", "version": settings.version}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
