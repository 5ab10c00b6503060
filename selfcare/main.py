"""
SelfCare Planner - API Service
Wellness activities, AI-generated content, social features and analytics.
"""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from selfcare.api import activities, analytics, content, social, users
from selfcare.auth.router import router as auth_router
from selfcare.database import db_manager
from selfcare.realtime.hub import notification_hub
from selfcare.realtime.router import router as realtime_router
from selfcare.repositories.base import BaseRepository
from selfcare.utils.config import get_settings
from selfcare.utils.errors import SelfCareException
from selfcare.utils.logger import get_logger
from selfcare.utils.logging_config import setup_logging
from selfcare.utils.metrics import REQUEST_COUNT, REQUEST_LATENCY, metrics

settings = get_settings()

# Setup structured logging
setup_logging(settings.service_name, log_level=settings.log_level, json_logs=settings.json_logs)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting SelfCare API...")
    if settings.auto_create_tables:
        await db_manager.create_all()
    logger.info("SelfCare API started successfully")

    yield

    logger.info("Shutting down SelfCare API...")
    await db_manager.dispose()
    logger.info("SelfCare API stopped")


app = FastAPI(
    title="SelfCare Planner API",
    description="""
    # SelfCare Planner

    Personalised self-care with a social layer.

    ## Features

    * **Activities** - Track, complete and share wellness activities
    * **Streaks & Achievements** - Daily streaks with automatic milestones
    * **AI Content** - Affirmations, activities, journaling prompts and tips
    * **Social** - Friends, support groups, challenges and a shared feed
    * **Analytics** - Progress trends, insights and data export
    * **Real-time** - WebSocket notifications at `/ws?token=<jwt>`

    ## Authentication

    All `/api` endpoints except register, login and the password reset flow
    require `Authorization: Bearer <token>`.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ERROR HANDLERS
# ============================================================================


@app.exception_handler(SelfCareException)
async def selfcare_exception_handler(request: Request, exc: SelfCareException):
    """Render domain errors as {message, details?}"""
    body = {"message": exc.message}
    if exc.details:
        body["details"] = exc.details
    if exc.status_code >= 500:
        metrics.log_event("exception_occurred", {"status_code": exc.status_code, "path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "message": "Validation error",
            # Raw input omitted, it can hold NaN or Infinity
            "details": jsonable_encoder(
                [{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
            ),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "message": "Something went wrong!",
            "error": str(exc) if settings.is_development else {},
        },
    )


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add request timing and Prometheus metrics"""
    start_time = time.time()
    response = await call_next(request)
    elapsed = time.time() - start_time

    route = request.scope.get("route")
    endpoint = getattr(route, "path", "unmatched")
    REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=response.status_code).inc()
    REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
    metrics.log_api_call(
        endpoint=request.url.path,
        method=request.method,
        status_code=response.status_code,
        duration_ms=elapsed * 1000,
    )

    response.headers["X-Process-Time-Ms"] = str(round(elapsed * 1000, 2))
    return response


# ============================================================================
# HEALTH & METRICS
# ============================================================================


@app.get("/health", tags=["health"], summary="Health check endpoint")
async def health_check():
    """Health check endpoint - no authentication required"""
    try:
        async with db_manager.get_session() as session:
            database_ok = await BaseRepository(session).ping()
    except SQLAlchemyError as e:
        logger.warning(f"Health check database ping failed: {e}")
        database_ok = False

    return {
        "status": "healthy" if database_ok else "degraded",
        "service": settings.service_name,
        "version": "1.0.0",
        "dependencies": {"database": "connected" if database_ok else "unavailable"},
        "realtime": notification_hub.get_stats(),
    }


@app.get("/metrics", tags=["health"], summary="Prometheus metrics endpoint")
async def metrics_endpoint():
    return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# ============================================================================
# ROUTERS
# ============================================================================

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(users.router)
api_router.include_router(activities.router)
api_router.include_router(content.router)
api_router.include_router(social.router)
api_router.include_router(analytics.router)

app.include_router(api_router)
app.include_router(realtime_router)


if __name__ == "__main__":
    uvicorn.run(
        "selfcare.main:app",
        host="0.0.0.0",
        port=settings.service_port,
        reload=settings.debug,
    )
