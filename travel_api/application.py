"""Application factory: builds the FastAPI app, its middleware, and its app-scoped services."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travel_api import __version__
from travel_api.api.v1 import router as v1_router
from travel_api.core.config import Settings, get_settings
from travel_api.core.database import Database
from travel_api.core.errors import register_exception_handlers
from travel_api.core.logging import REQUEST_ID_HEADER, configure_logging, log_requests
from travel_api.core.security import TokenCodec


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application with its own database handle and token codec.

    Both live on app.state for the lifetime of the process and are reached by
    request dependencies; the engine is disposed on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    token_codec = TokenCodec.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        database.dispose()

    app = FastAPI(
        title="Travel API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.token_codec = token_codec

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        # Renewed access tokens come back in the Authorization response header.
        expose_headers=["Authorization", REQUEST_ID_HEADER],
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    app.include_router(v1_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Travel API"}

    return app
