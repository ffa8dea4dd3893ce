"""
Reserved Seating API - Main Application Entry Point

Seat holds and reservations for events in configurable venues:
- Compare-and-set seat holds, exactly one winner per free seat
- All-or-nothing order completion
- Background expiry of abandoned orders
- Redis-backed seat state and listing cache
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from seating.api.errors import register_exception_handlers
from seating.api.middleware import RequestLoggingMiddleware
from seating.api.router import api_router
from seating.core.config import Settings, get_settings
from seating.core.logging import get_logger, setup_logging
from seating.core.metrics import metrics_endpoint
from seating.services.engine import ReservationEngine


def create_app(settings: Optional[Settings] = None, engine: Optional[ReservationEngine] = None) -> FastAPI:
    """
    Build the application. Pass `engine` to serve a pre-built engine
    (tests); otherwise one is connected from `settings` at startup.
    """
    settings = settings or (engine.settings if engine else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle: startup and shutdown hooks."""
        setup_logging(settings)
        logger = get_logger(__name__)

        logger.info(
            "application_starting",
            app=settings.APP_NAME,
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
        )

        if getattr(app.state, "engine", None) is None:
            app.state.engine = await ReservationEngine.connect(settings)
        await app.state.engine.start()

        yield

        await app.state.engine.shutdown()
        logger.info("application_shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Reserved seating API with concurrency-safe seat holds",
        lifespan=lifespan,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.engine = engine

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom middleware
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint for Docker and load balancers."""
        engine = request.app.state.engine
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "reaper": engine.reaper.running if engine else False,
            "cache": await engine.event_cache.stats() if engine else {"status": "disabled"},
        }

    @app.get("/metrics", tags=["Health"], include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()
