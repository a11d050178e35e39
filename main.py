"""
MockInterview Proctor - proctored mock-interview session runner

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mockinterview.config.settings import get_settings
from mockinterview.api.router import api_router
from mockinterview.api.dependencies import cleanup

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting MockInterview Proctor...")
    settings = get_settings()
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")
    logger.info(f"Storing drafts and sessions in {settings.data_dir}")
    if not settings.databricks_host:
        logger.warning("DATABRICKS_HOST is not set; question generation and evaluation will fail")
    logger.info(
        f"Proctoring: gaze every {settings.gaze_interval_seconds}s "
        f"({settings.gaze_alert_threshold}/{settings.gaze_window_size} to alert), "
        f"noise above {settings.loud_noise_threshold}"
    )

    yield

    # Shutdown
    logger.info("Shutting down MockInterview Proctor...")
    await cleanup()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Proctored mock-interview session runner",
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "ai_configured": bool(settings.databricks_host and settings.databricks_token),
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
