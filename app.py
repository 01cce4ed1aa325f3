"""
Crime Record Management System API: stations, officers, criminals, FIRs and a
dashboard over PostgreSQL, with JWT authentication and role-based access.
"""
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

import config
from database.connection import Database
from database.repository import SqlRepository
from core.exceptions import CRMSError
from core.logger import logger
from middleware.security import (
    RateLimitMiddleware, SecurityHeadersMiddleware,
    setup_cors, setup_trusted_hosts
)
from middleware.auth_middleware import AuthRequiredMiddleware
from services.auth_service import AuthService
from services.seed_service import SeedService
from routers.auth import router as auth_router
from routers.users import router as users_router
from routers.profile import router as profile_router
from routers.stations import router as stations_router
from routers.officers import router as officers_router
from routers.criminals import router as criminals_router
from routers.fir import router as fir_router
from routers.dashboards import router as dashboards_router
from routers.seed import router as seed_router


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for FastAPI app.
    Initialize database, bootstrap admin and optional demo data on startup.
    """
    logger.info("=" * 60)
    logger.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}...")
    logger.info("=" * 60)

    try:
        config.db = Database(
            database_url=config.DATABASE_URL,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW
        )
        # Create tables if they don't exist
        config.db.create_tables()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise

    with config.db.get_session() as session:
        repo = SqlRepository(session)
        if AuthService.ensure_admin(repo) is None:
            logger.warning("DEFAULT_ADMIN_* not set; no bootstrap admin created")
        if config.SEED_ON_STARTUP and not SeedService.status(repo)["seeded"]:
            SeedService.seed(repo)

    logger.info("=" * 60)
    logger.info("Server ready!")
    logger.info(f"Environment: {config.ENVIRONMENT}")
    logger.info("API Docs: http://localhost:8000/docs")
    logger.info("=" * 60)

    yield

    # Cleanup on shutdown
    logger.info("Shutting down...")
    if config.db:
        config.db.engine.dispose()
        logger.info("Database connections closed")


# Initialize FastAPI app
app = FastAPI(
    title=config.APP_NAME,
    description="Crime record management API: police stations, officers, criminals, FIRs and dashboard",
    version=config.APP_VERSION,
    lifespan=lifespan
)


# ============================================================================
# Exception handlers
# ============================================================================

@app.exception_handler(CRMSError)
async def crms_error_handler(request: Request, exc: CRMSError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    content = {"detail": exc.message}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg")}
        for err in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} -> 400: invalid request ({len(errors)} error(s))")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors}
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# Setup security middleware
app.add_middleware(SecurityHeadersMiddleware)
if config.RATE_LIMIT_PER_MINUTE or config.RATE_LIMIT_PER_HOUR:
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=config.RATE_LIMIT_PER_MINUTE,
        requests_per_hour=config.RATE_LIMIT_PER_HOUR
    )
# Flags unauthenticated calls to protected routes; dependencies enforce
app.add_middleware(AuthRequiredMiddleware)
setup_cors(app, config.CORS_ORIGINS, allow_credentials=config.CORS_ALLOW_CREDENTIALS)
if config.ENVIRONMENT == "production":
    setup_trusted_hosts(app, config.TRUSTED_HOSTS)

# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(profile_router)
app.include_router(stations_router)
app.include_router(officers_router)
app.include_router(criminals_router)
app.include_router(fir_router)
app.include_router(dashboards_router)
app.include_router(seed_router)


@app.get("/")
async def root():
    """Root endpoint with API information. Public endpoint."""
    return {
        "message": config.APP_NAME,
        "version": config.APP_VERSION,
        "environment": config.ENVIRONMENT,
        "endpoints": {
            "login": "POST /api/auth/login",
            "stations": "/api/police-stations",
            "officers": "/api/officers",
            "criminals": "/api/criminals",
            "fir": "/api/fir",
            "dashboard": "/api/dashboard/stats"
        },
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring. Public endpoint."""
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "checks": {}
    }

    try:
        if config.db is None:
            health_status["checks"]["database"] = {"status": "error", "error": "not initialized"}
            health_status["status"] = "degraded"
        else:
            with config.db.get_session() as db:
                db.execute(text("SELECT 1"))
            health_status["checks"]["database"] = {"status": "ok"}
    except Exception as e:
        health_status["checks"]["database"] = {"status": "error", "error": str(e)}
        health_status["status"] = "degraded"

    return health_status


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
