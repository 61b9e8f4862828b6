"""
Washline — FastAPI ASGI entry point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from washline.api.deps import DbSession
from washline.api.v1.router import api_router
from washline.config import get_settings
from washline.core.errors import InternalError, WashlineError
from washline.core.logging_config import setup_logging
from washline.core.middleware import RequestLoggingMiddleware
from washline.core.redis import close_redis
from washline.core.responses import error_response
from washline.db.session import engine

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: logging on startup, pooled connections released on shutdown."""
    setup_logging()
    logger.info("Washline API starting (environment=%s)", settings.ENVIRONMENT)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("Washline API stopped")


app = FastAPI(
    title="Washline",
    description="Order fulfillment and quantity reconciliation for a garment wash plant",
    version="0.1.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WashlineError)
async def washline_error_handler(request: Request, exc: WashlineError):
    return JSONResponse(status_code=exc.status_code, content=error_response(exc.message, exc.errors))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, str] = {}
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        field = ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0])
        errors.setdefault(field, err["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response("Validation failed", errors),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=error_response(str(exc.detail)), headers=exc.headers)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # Two writers raced past the reference number pre-check
    if "reference_no" in str(exc.orig):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=error_response("Reference number already exists"))
    logger.exception("Integrity error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=error_response("Conflicting data"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = InternalError.default_message if settings.is_production else f"{InternalError.default_message}: {exc}"
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_response(message))


app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health(db: DbSession):
    """Health check for load balancers and Docker. Pings the database."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "service": "washline"}
