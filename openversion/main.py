"""
OpenVersion - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from openversion.api import versions
from openversion.config import settings
from openversion.db import init_db, close_db
from openversion.version import __version__
import logging
import re


# Custom logging filter to redact sensitive data
class SensitiveDataFilter(logging.Filter):
    """Filter to redact access tokens from logs"""

    def filter(self, record):
        if hasattr(record, 'msg'):
            msg = str(record.msg)

            # Redact bearer tokens
            msg = re.sub(r'(Bearer\s+)[A-Za-z0-9._~+/=-]+', r'\1[REDACTED]', msg)

            # Redact X-Api-Key header values in header dumps
            # Catches: x-api-key: abc or 'x-api-key': 'abc'
            msg = re.sub(
                r"(['\"]?x-api-key['\"]?\s*[:=]\s*['\"]?)([^'\"\s,}]+)",
                r"\1[REDACTED]",
                msg,
                flags=re.IGNORECASE
            )

            # The configured token itself, wherever it shows up
            if settings.api_token and settings.api_token in msg:
                msg = msg.replace(settings.api_token, '[REDACTED]')

            record.msg = msg
        return True


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Add filter to all loggers
for handler in logging.root.handlers:
    handler.addFilter(SensitiveDataFilter())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown"""
    # Startup
    logger.info("🚀 Starting OpenVersion")
    logger.info(f"📦 Version: {__version__}")
    logger.info(f"📝 Environment: {settings.environment}")

    await init_db()

    logger.info(f"✅ Compute retries: up to {settings.compute_max_attempts} attempt(s)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()


app = FastAPI(
    title="OpenVersion",
    description="Next-version computation for branches, with optimistic concurrency",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",  # Enable auto-generated Swagger UI
    redoc_url="/redoc",  # Enable auto-generated ReDoc
    openapi_url="/openapi.json"  # Enable auto-generated OpenAPI schema
)


# Malformed bodies are a client error like any other validation failure
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors and answer 400"""
    logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": exc.errors()})
    )


# Register version routes
app.include_router(versions.router, tags=["versions"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": "OpenVersion",
        "version": __version__,
        "status": "running",
        "environment": settings.environment
    }


@app.get("/health")
async def health_check():
    """Health check endpoint (no dependency checks)"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("openversion.main:app", host=settings.host, port=settings.port)
