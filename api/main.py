"""
FastAPI application initialization
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import health, import_jobs
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.exceptions import (
    ImportStatusException,
    NotFoundError,
    ConflictError,
    InvalidRangeError,
    AlreadyFinishedError,
    LockUnavailableError,
)
from core.logging import setup_logging
from imports.watchdog import ImportWatchdog
import logging

setup_logging()

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    NotFoundError: 404,
    ConflictError: 409,
    AlreadyFinishedError: 409,
    InvalidRangeError: 400,
    LockUnavailableError: 423,
}

# Create FastAPI app
app = FastAPI(
    title="Import Status API",
    description="Status tracking and liveness supervision for historical data imports",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

watchdog = ImportWatchdog()


# Include routers
app.include_router(health.router)
app.include_router(import_jobs.router)


@app.exception_handler(ImportStatusException)
async def import_status_exception_handler(request: Request, exc: ImportStatusException) -> JSONResponse:
    status_code = next(
        (code for cls, code in ERROR_STATUS_CODES.items() if isinstance(exc, cls)),
        500
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    else:
        logger.debug(f"{request.method} {request.url.path} rejected: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": exc.message}
    )


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Import Status API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    watchdog.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Import Status API")
    watchdog.stop()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Import Status API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "imports": "/imports"
        }
    }
