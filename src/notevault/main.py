"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown: schema, bootstrap admin,
engine disposal. Middleware, error handlers, and routers all registered
here.

Startup is fail-fast: a store that can't be reached, a schema that can't
be created, or a half-configured bootstrap admin raises out of the
lifespan and the process never starts serving.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from notevault import __version__
from notevault.api import api_router
from notevault.api.health import router as health_router
from notevault.config import settings
from notevault.errors import register_error_handlers
from notevault.logging import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    from notevault.db.engine import async_session_factory, create_schema, engine
    from notevault.services.admin_service import bootstrap_admin

    logger.info(
        "notevault.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    await create_schema(engine)
    async with async_session_factory() as db:
        await bootstrap_admin(db, settings.admin_email, settings.admin_password)

    yield

    logger.info("notevault.shutdown")
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging(settings.debug)

    app = FastAPI(
        title="notevault",
        description="Notes backend with cookie sessions and shareable links",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → routing (session/admin dependencies) → handler

    from notevault.middleware.cors import CORSMiddleware
    from notevault.middleware.request_id import RequestIdMiddleware

    app.add_middleware(CORSMiddleware, allowed_origin=settings.frontend_origin)
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: notevault.main:app)
app = create_app()
