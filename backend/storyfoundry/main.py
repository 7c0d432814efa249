"""
StoryFoundry - Writers' project studio
Main FastAPI Application
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import time
import logging

from storyfoundry.core.config import settings
from storyfoundry.core.dependencies import get_event_bus, reset_event_bus
from storyfoundry.core.rate_limit import limiter
from storyfoundry.api.v1 import api_router
from storyfoundry.infrastructure.event_bus import RedisStreamsEventBus, start_consumer, stop_consumer
from storyfoundry.infrastructure.observability import (
    ObservabilityMiddleware,
    METRICS_CONTENT_TYPE,
    render_metrics,
    configure_structlog,
    setup_tracing,
)
from storyfoundry.shared_kernel.exceptions import DomainException

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True,
)
logger = logging.getLogger(__name__)
app_logger = logging.getLogger("storyfoundry")
app_logger.setLevel(settings.LOG_LEVEL)
app_logger.propagate = True

if settings.STRUCTURED_LOGGING_ENABLED:
    configure_structlog()
if settings.TRACING_ENABLED:
    setup_tracing(settings.PROJECT_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    logger.info(f"Environment: {settings.APP_ENV}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(
        "Supabase configured: url=%s anon_key=%s service_key=%s",
        bool(settings.SUPABASE_URL),
        bool(settings.SUPABASE_ANON_KEY),
        bool(settings.SUPABASE_SERVICE_ROLE_KEY),
    )

    event_bus = get_event_bus()
    consumer_task = consumer_stop = None
    if isinstance(event_bus, RedisStreamsEventBus):
        consumer_task, consumer_stop = start_consumer(
            event_bus,
            timeout_ms=settings.EVENT_BUS_POLL_TIMEOUT_MS,
        )
        logger.info("Redis event consumer started")

    yield

    await stop_consumer(consumer_task, consumer_stop)
    if isinstance(event_bus, RedisStreamsEventBus):
        await event_bus.close()
    reset_event_bus()
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Writers' project studio",
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Add rate limiter state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Trusted Host Middleware (optional, for production)
if not settings.DEBUG:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS
    )

if settings.OBSERVABILITY_ENABLED:
    app.add_middleware(ObservabilityMiddleware)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


# Exception handlers
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Render domain errors as ``{"error": ..., **details}``"""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=True,
        extra={
            "method": request.method,
            "url": str(request.url),
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "An internal error occurred",
            "error": str(exc) if settings.DEBUG else None,
            "type": type(exc).__name__ if settings.DEBUG else None
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.APP_ENV,
        "supabase_configured": bool(settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY),
    }


if settings.METRICS_ENABLED:
    @app.get(settings.METRICS_PATH, tags=["Metrics"])
    async def metrics():
        return Response(content=render_metrics(), media_type=METRICS_CONTENT_TYPE)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": "StoryFoundry API",
        "version": settings.VERSION,
        "docs": "/api/docs" if settings.DEBUG else None
    }


# Include API router
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storyfoundry.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
