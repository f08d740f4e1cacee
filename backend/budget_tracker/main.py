"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from budget_tracker.api.router import api_router
from budget_tracker.config import settings
from budget_tracker.context import AppContext, build_context
from budget_tracker.dependencies import get_context
from budget_tracker.errors import PersistenceError, ValidationError

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests install their own context before startup
    owns_context = getattr(app.state, "context", None) is None
    if owns_context:
        app.state.context = build_context(settings)
        if settings.seed_demo_data and not app.state.context.is_remote:
            from budget_tracker.seed import seed_demo_data
            await seed_demo_data(app.state.context.data_service(), settings.dev_user_id)

    logger.info(f"{settings.app_name} started with {app.state.context.store.backend_name} storage")
    try:
        yield
    finally:
        if owns_context:
            await app.state.context.close()
            app.state.context = None


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="Personal income and expense tracker with budgets and dashboards",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"Persistence failure on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=503, content={"detail": exc.message})


# Include API router
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/api/v1/health")
def health_check(context: AppContext = Depends(get_context)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "app_name": context.settings.app_name,
        "backend": context.store.backend_name,
    }
