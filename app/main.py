"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Builds the configured user store and registers routes
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.schemas.response import ErrorResponse, HealthResponse
from app.services.store_factory import build_user_store, close_user_store
from app.api import pages, users

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting UserDesk application...")

    try:
        validate_settings()
        logger.info("✅ Configuration validated")

        store = await build_user_store(settings)
        app.state.user_store = store
        app.state.started_at = time.monotonic()

        logger.info(f"✅ User store ready (backend: {store.backend_name})")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Started with {await store.count()} users")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    # Shutdown
    logger.info("🛑 Shutting down UserDesk application...")
    try:
        await close_user_store(app.state.user_store)
        logger.info("👋 UserDesk application shut down successfully")
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="UserDesk",
    description="User management service with MongoDB or in-memory storage",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Reject oversized bodies, add processing time and security headers to all responses."""
    start_time = time.time()
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > settings.MAX_REQUEST_BODY_BYTES:
        logger.warning(
            f"Rejected oversized body: {request.method} {request.url.path}",
            extra={"content_length": int(content_length)}
        )
        response = JSONResponse(
            status_code=413,
            content=ErrorResponse(
                error=f"Request body exceeds {settings.MAX_REQUEST_BODY_BYTES} bytes",
                code="PAYLOAD_TOO_LARGE",
                details=None
            ).model_dump()
        )
    else:
        response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    for header, value in SECURITY_HEADERS.items():
        response.headers[header] = value

    if settings.is_development:
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")

    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


app.include_router(pages.router)
app.include_router(users.router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "UserDesk API",
        "version": "1.0.0",
        "description": "Create, read, update and delete users",
        "status": "running",
        "environment": settings.ENVIRONMENT,
        "backend": settings.USER_STORE_BACKEND,
    }


@app.get("/health", tags=["Health"], response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint.
    Pings the storage backend and reports the user count.
    """
    store = request.app.state.user_store
    health = HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=int(time.monotonic() - request.app.state.started_at),
        environment=settings.ENVIRONMENT,
        backend=store.backend_name,
    )

    if await store.ping():
        health.checks["database"] = "healthy"
        health.totalUsers = await store.count()
        status_code = 200
    else:
        health.checks["database"] = "unhealthy"
        health.status = "unhealthy"
        status_code = 503

    return JSONResponse(content=health.model_dump(), status_code=status_code)


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    if await request.app.state.user_store.ping():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "database_unavailable"}
    )


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
