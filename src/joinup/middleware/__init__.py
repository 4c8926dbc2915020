"""Middleware registration."""

from fastapi import FastAPI

from joinup.config import Settings
from joinup.middleware.cors import setup_cors
from joinup.middleware.error_handler import setup_error_handlers
from joinup.middleware.logging import setup_logging
from joinup.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    Starlette executes middleware in reverse-add order (last added = outermost).
    CORS is outermost so it also wraps error responses.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
