"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from livefolio.api.routers import valuation_router, movers_router, closed_trades_router
from livefolio.app_context import get_app_context
from livefolio.config.logging_config import setup_logging
from livefolio.config.settings import get_settings
from livefolio.core.exceptions import AppError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = get_app_context()
    await context.start()
    yield
    # Shutdown
    await context.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Live profit/loss for brokerage export positions",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(valuation_router)
app.include_router(movers_router)
app.include_router(closed_trades_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=400,
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
