"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rentdesk.config.settings import get_settings
from rentdesk.config.logging_config import setup_logging
from rentdesk.app_context import get_app_context
from rentdesk.api.routers import dashboard_router, notifications_router
from rentdesk.core.exceptions import AppError, ApiError, NotFoundError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = get_app_context()
    await context.init()
    yield
    # Shutdown
    await context.dispose()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Property-management dashboard data and notification core",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(dashboard_router)
app.include_router(notifications_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    if isinstance(exc, ApiError):
        status_code = exc.status_code
    elif isinstance(exc, NotFoundError):
        status_code = 404
    else:
        status_code = 400
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
