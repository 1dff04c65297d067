"""
FastAPI application factory for the program delivery service.

Run with: uvicorn backend.main:app --reload
"""

import logging
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app. Tests pass their own Settings; otherwise the environment is read."""
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    app = FastAPI(
        title="Coaching Program Delivery API",
        description="Program templates, client enrollments and daily program delivery",
        version="1.0.0",
    )

    _configure_cors(app, settings)
    _include_routers(app)

    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
            profiles_sample_rate=0.1,
        )
        logger.info("Sentry initialized for program-delivery-api")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    trusted_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    trusted_origins.extend(settings.extra_cors_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=trusted_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Register the health, template, enrollment and cron routers."""
    from api.routers import (
        cron_router,
        enrollments_router,
        health_router,
        templates_router,
    )

    app.include_router(health_router)
    app.include_router(templates_router)
    app.include_router(enrollments_router)
    app.include_router(cron_router)


app = create_app()
