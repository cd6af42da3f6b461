import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from fanout import __version__
from fanout.config import settings
from fanout.database import async_session, engine
from fanout.middleware import (
    RequestSizeLimitMiddleware,
    ScopedCORSMiddleware,
    SecurityHeadersMiddleware,
)
from fanout.redis import redis
from fanout.response import error_response
from fanout.routers import auth, integrations, notifications
from fanout.routers.notifications import CORS_HEADERS, NOTIFICATION_PATHS

logger = logging.getLogger("fanout")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    logger.info("%s %s starting", settings.app_name, __version__)
    yield
    await engine.dispose()
    await redis.aclose()


app = FastAPI(
    title="Workspace Notifier",
    description="Fan workspace notifications out to Slack, Discord, Teams and generic webhooks.",
    version=__version__,
    lifespan=lifespan,
)

# CORS
_cors_origins = (
    [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if settings.cors_origins
    else ["*"]
)
# The fan-out endpoint answers its own preflight with a fixed header set
app.add_middleware(
    ScopedCORSMiddleware,
    exempt_paths=NOTIFICATION_PATHS,
    allow_origins=_cors_origins,
    allow_methods=["*"],
    allow_headers=[h.strip() for h in CORS_HEADERS["Access-Control-Allow-Headers"].split(",")]
    + ["x-api-key"],
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)


# --- Exception Handlers ---


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        clean = {k: v for k, v in err.items() if k not in ("ctx", "input")}
        if "msg" in clean:
            clean["msg"] = str(clean["msg"])
        errors.append(clean)
    return JSONResponse(
        status_code=422,
        content=error_response(422, "Validation error", errors),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_response(500, "Internal server error"),
    )


# --- Routes ---

api_v1 = APIRouter(prefix="/v1")
api_v1.include_router(auth.router)
api_v1.include_router(integrations.router)
app.include_router(api_v1)

# Fan-out endpoint (carries its own CORS headers and error bodies)
app.include_router(notifications.router)


@app.get("/", summary="API root")
async def root():
    return {"name": settings.app_name, "status": "ok", "version": __version__}


@app.get("/health", summary="Health check")
async def health_ping():
    status = "healthy"
    checks = {}

    try:
        async with async_session() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception:
        logger.warning("Health check: database unavailable", exc_info=True)
        checks["database"] = "unavailable"
        status = "degraded"

    try:
        await redis.ping()
        checks["redis"] = "ok"
    except Exception:
        checks["redis"] = "unavailable"
        status = "degraded"

    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "checks": checks,
    }
