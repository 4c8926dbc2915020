"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from joinup.config import get_settings
from joinup.database import close_db, create_schema, init_db
from joinup.email.service import reset_email_service
from joinup.gamification.router import router as gamification_router
from joinup.health.router import router as health_router
from joinup.middleware import setup_middleware
from joinup.redis_client import close_redis, init_redis
from joinup.registrations.router import router as registrations_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.auto_create_schema:
        await create_schema()
        logger.info("Database schema created from ORM metadata")
    if settings.redis_url:
        await init_redis(settings.redis_url)
    else:
        logger.warning("No Redis URL configured; notification fan-out disabled")

    yield

    reset_email_service()
    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="JoinUP Gamification API",
        description="Points, levels, streaks and badges for the JoinUP competition platform",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(gamification_router)
    app.include_router(registrations_router)

    return app


app = create_app()
