"""
AirOps Admin - FastAPI Main Application Entry Point
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime
import logging
import time
import uuid

import structlog

from airops.config import settings
from airops.api.responses import register_exception_handlers
from airops.api.routes import api_router
from airops.db.database import init_db, close_db

FEATURES = [
    "Admin Authentication",
    "Flight Management",
    "Fare Management",
    "Weather Integration",
    "Operational Reports",
    "AI Route Safety",
    "Dynamic Pricing",
    "Delay Prediction",
]


def configure_logging() -> None:
    """Route structlog through stdlib logging at LOG_LEVEL."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )
    renderer = (
        structlog.processors.JSONRenderer() if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting AirOps API", version=settings.app_version, environment=settings.app_env)
    await init_db()
    logger.info("Database tables ready")

    yield

    await close_db()
    logger.info("AirOps API stopped")


async def log_requests(request: Request, call_next):
    """Bind a request id for every log line of the request and log its outcome."""
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

    logger.info(
        "Request handled",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=elapsed_ms,
    )
    response.headers["X-Request-ID"] = request_id
    return response


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=f"{settings.airline_name} back-office administration and route analysis",
        version=settings.app_version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(log_requests)

    register_exception_handlers(app)

    @app.get("/api/health", tags=["Health"])
    async def health_check():
        return {
            "success": True,
            "status": "OK",
            "message": f"{settings.airline_name} API is running",
            "version": settings.app_version,
            "environment": settings.app_env,
            "timestamp": datetime.utcnow().isoformat(),
            "features": FEATURES,
        }

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "airops.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
