import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.dal import SqliteStore
from .db.seed import seed_rows
from .db.store import EntityStore, MemoryStore
from .routers import dashboard, inventory, meta, rates, transactions
from .services.auth import IdentityProvider, StaticTokenIdentity
from .services.rates.pipeline import RatePipeline

logger = logging.getLogger("forex_bureau")


def build_store(settings: Settings) -> EntityStore:
    if settings.db_path is not None:
        return SqliteStore(settings.db_path)
    logger.info("no database configured, using in-memory store with seed rows")
    return MemoryStore(seed_rows())


def create_app(
    settings_override: Settings | None = None,
    *,
    store: EntityStore | None = None,
    rate_pipeline: RatePipeline | None = None,
    identity: IdentityProvider | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. store / rate_pipeline / identity replace the
    collaborators built from settings (tests inject in-memory stores and
    mock-transport pipelines here).
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug)

    try:
        app_store = store if store is not None else build_store(settings)
    except Exception:
        # Failing to open the store is fatal; re-raise after logging
        logger.exception("failed to initialise entity store on startup")
        raise

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.store = app_store
    app.state.rate_pipeline = rate_pipeline or RatePipeline.from_settings(settings)
    app.state.identity = identity or StaticTokenIdentity(settings.auth_tokens)

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.StoreError, errors.store_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(meta.router)
    app.include_router(rates.router)
    app.include_router(dashboard.router)
    app.include_router(inventory.router)
    app.include_router(transactions.router)

    @app.get("/")
    async def root():
        return {"message": "Forex Bureau Dashboard API", "version": settings.version}

    return app


app = create_app()
