"""FastAPI app for parcelscope."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parcelscope import __version__ as VERSION
from parcelscope.api.errors import register_exception_handlers
from parcelscope.api.routes import router
from parcelscope.logging_config import configure_logging
from parcelscope.settings import get_settings

# Load .env before the first get_settings() call
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the served endpoints on startup."""
    settings = get_settings()
    base = f"http://localhost:{settings.api.port}"
    logger.info("parcelscope %s listening on port %d (env=%s)", VERSION, settings.api.port, settings.env)
    logger.info("Health check: %s/health", base)
    logger.info("API endpoint: POST %s/api/scrape", base)
    if not settings.auth_enabled:
        logger.warning("AUTH_TOKEN not set. Authorization will accept any token.")

    yield

    logger.info("Shutting down parcelscope")


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    configure_logging()

    application = FastAPI(
        title="parcelscope",
        description="Parcel tracking lookups via headless-browser interception of the tracking site's API.",
        version=VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)
    application.include_router(router)
    return application


app = create_app()
