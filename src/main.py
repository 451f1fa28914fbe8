"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.admin.router import router as admin_auth_router
from src.api.responses import http_exception_handler, validation_exception_handler
from src.api.v1.onboarding import router as onboarding_router
from src.config import settings
from src.landing.router import router as wizard_router
from src.redis_client import close_redis

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info(
        "app_starting",
        environment=settings.environment,
        submission_api=settings.submission_api_base_url or None,
    )
    yield
    await close_redis()
    logger.info("app_shutting_down")


app = FastAPI(
    title="Project Onboarding API",
    description="Onboarding wizard and submission management for the studio site",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(wizard_router)
app.include_router(onboarding_router)
app.include_router(admin_auth_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Project Onboarding API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": "0.1.0"}
