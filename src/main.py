"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.config import get_settings
from src.database import engine, init_db

# Import routers
from src.routers import health, ops, pages, reports

# Import middleware
from src.middleware import logging_middleware, register_exception_handlers
from src.utils.logger import configure_logging, get_logger

settings = get_settings()

# Configure logging early
configure_logging(log_level=settings.log_level, debug=settings.debug)
log = get_logger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    log.info("starting application", debug=settings.debug, log_level=settings.log_level)
    await init_db()
    log.info("database initialized")

    if not settings.has_water_api_key():
        log.warning("water api key missing, contaminant lists will be empty")
    if not settings.api_secret:
        log.warning("api secret missing, report creation will reject every request")

    yield

    log.info("shutting down application")
    await engine.dispose()
    log.info("database connections closed")


app = FastAPI(
    title="Water Report API",
    description="Personalized water quality reports for CRM leads",
    version=VERSION,
    lifespan=lifespan,
)

# Register exception handlers first
register_exception_handlers(app)

_cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins or ["*"],
    allow_credentials=bool(_cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware
app.middleware("http")(logging_middleware)

# Register routers
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(reports.router, prefix="/api/v1", tags=["Reports"])
app.include_router(ops.router, prefix="/api/v1", tags=["Ops"])
app.include_router(reports.legacy_router)
app.include_router(pages.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Water Report API",
        "version": VERSION,
        "endpoints": {
            "health": "/api/v1/health",
            "create_report": "/api/v1/reports",
            "report_data": "/api/v1/reports/{report_id}",
            "report_page": "/report?id={report_id}",
            "water_check": "/api/v1/ops/water-check",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
