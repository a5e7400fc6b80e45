"""FastAPI application entry point"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from lessonhub.core.config import settings
from lessonhub.core.exceptions import LessonHubError
from lessonhub.core.logging import setup_logging
from lessonhub.core.middleware import (
    global_exception_handler, lessonhub_exception_handler, security_middleware, setup_cors_middleware
)
from lessonhub.core.otel import initialize_otel, instrument_fastapi, setup_otel_logging
from lessonhub.db.firestore import initialize_firebase

# Import routers
from lessonhub.api import admin, auth, coaches, monitoring, videos

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    # Startup
    otel_initialized = initialize_otel()
    if otel_initialized:
        if setup_otel_logging():
            logger.info(f"OpenTelemetry fully initialized, exporting to {settings.OTEL_EXPORTER_OTLP_ENDPOINT}")
        else:
            logger.warning("OpenTelemetry metrics/traces initialized but logging setup failed")
    else:
        logger.info("OpenTelemetry not configured - running without distributed tracing")

    logger.info("Initializing Firebase Admin...")
    try:
        initialize_firebase()
        logger.info("Firebase Admin initialized successfully")
    except Exception as e:
        # Requests that need the store will fail with a translated error
        logger.error(f"Firebase Admin initialization failed: {e}")

    yield

    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="LessonHub Backend",
    description="Coach-led video lessons with subscription-gated access",
    version="1.0.0",
    lifespan=lifespan
)

# Instrument FastAPI with OpenTelemetry
instrument_fastapi(app)

# CORS middleware
setup_cors_middleware(app)

# Security middleware
app.middleware("http")(security_middleware)

# Exception handlers
app.add_exception_handler(LessonHubError, lessonhub_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Include routers
app.include_router(auth.router)
app.include_router(videos.router)
app.include_router(coaches.router)
app.include_router(admin.router)
app.include_router(monitoring.router)
