"""
Conduit - FastAPI Application Entry Point

A lightweight API-testing service: users save HTTP requests, execute
them against arbitrary endpoints, and review the history of each execution.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import init_db
from .exceptions import register_exception_handlers
from .logging_config import setup_logging
from .routers import requests, execute, history


logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    setup_logging(settings.log_level)
    # Startup: Initialize database
    init_db()
    logger.info("Conduit started (request timeout %.1fs)", settings.request_timeout)
    if not settings.jwt_secret:
        logger.warning("CONDUIT_JWT_SECRET is not set; authenticated routes will fail")
    yield


app = FastAPI(
    title="Conduit",
    description="Execute HTTP requests, inspect responses and keep an execution history",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "Conduit",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(execute.router)
app.include_router(requests.router)
app.include_router(history.router)
