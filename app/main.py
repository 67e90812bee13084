"""
Reserve API - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from app.config import settings
from app.api import auth, availability, catalog, cron, feature_flags, reservations
from app.api.admin import analytics as admin_analytics
from app.api.admin import blocked_times as admin_blocked_times
from app.api.admin import customers as admin_customers
from app.api.admin import menus as admin_menus
from app.api.admin import reservations as admin_reservations
from app.api.admin import settings as admin_settings
from app.api.admin import staff as admin_staff
from app.api.auth import require_admin
from app.api.deps import general_rate_limit
from app.errors import AppError, RateLimitExceededError
from app.schemas.common import error_body

logging.basicConfig(format="%(message)s", level=settings.log_level)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

HTTP_ERROR_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "DUPLICATE_RECORD",
    429: "RATE_LIMIT_EXCEEDED",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Reserve API", version="1.0.0", tenant_id=settings.tenant_id)
    yield
    logger.info("Shutting down Reserve API")


# Create FastAPI application
app = FastAPI(
    title="Reserve API",
    description="Multi-tenant appointment booking",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error envelope

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, exc.details),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body("VALIDATION_ERROR", "Invalid request", details),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "INTERNAL_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error", path=request.url.path, error=str(exc.orig))
    return JSONResponse(
        status_code=409,
        content=error_body("DUPLICATE_RECORD", "A record with the same value already exists"),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_body("INTERNAL_ERROR", "Internal server error"),
    )


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    from app.database import SessionLocal

    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    # Check Redis
    try:
        from app.services.rate_limit import get_redis_client
        await get_redis_client().ping()
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


public = [Depends(general_rate_limit)]
admin_only = [Depends(require_admin)]

# Public and customer routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(catalog.router, tags=["Catalog"], dependencies=public)
app.include_router(availability.router, tags=["Availability"], dependencies=public)
app.include_router(reservations.router, prefix="/reservations", tags=["Reservations"], dependencies=public)
app.include_router(feature_flags.router, tags=["Feature Flags"], dependencies=public)

# Admin routers
app.include_router(admin_menus.router, prefix="/admin/menus", tags=["Admin"], dependencies=admin_only)
app.include_router(admin_staff.router, prefix="/admin/staff", tags=["Admin"], dependencies=admin_only)
app.include_router(admin_blocked_times.router, prefix="/admin/blocked-times", tags=["Admin"], dependencies=admin_only)
app.include_router(admin_customers.router, prefix="/admin/customers", tags=["Admin"], dependencies=admin_only)
app.include_router(admin_reservations.router, prefix="/admin/reservations", tags=["Admin"], dependencies=admin_only)
app.include_router(admin_settings.router, prefix="/admin/settings", tags=["Admin"], dependencies=admin_only)
app.include_router(admin_analytics.router, prefix="/admin", tags=["Admin"], dependencies=admin_only)

# Super admin
app.include_router(feature_flags.super_admin_router, prefix="/super-admin", tags=["Super Admin"])

# Scheduler
app.include_router(cron.router, prefix="/cron", tags=["Cron"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
