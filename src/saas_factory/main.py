"""SaaS Factory API - FastAPI with SQLAlchemy."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import time
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from . import __version__, routers
from .clients.progress_stream import ProgressStreamClient
from .config import get_settings
from .database import dispose_engine
from .errors import AppError
from .logging import (
    CORRELATION_HEADER,
    clear_context,
    get_logger,
    new_correlation_id,
    set_correlation_id,
    setup_logging,
)

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    setup_logging(settings)

    app.state.progress_stream = None
    if settings.redis_url:
        progress_stream = ProgressStreamClient(settings.redis_url)
        await progress_stream.connect()
        app.state.progress_stream = progress_stream

    logger.info("service_started", demo_mode=settings.demo_mode, environment=settings.environment)
    yield

    if app.state.progress_stream is not None:
        await app.state.progress_stream.close()
    await dispose_engine()


app = FastAPI(
    title="SaaS Factory API",
    description="Generate, share and deploy scaffolded SaaS projects",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def correlation_middleware(request: Request, call_next):
    correlation_id = request.headers.get(CORRELATION_HEADER) or new_correlation_id()
    set_correlation_id(correlation_id)
    structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)

    start = time.time()
    try:
        response = await call_next(request)
        duration_ms = round((time.time() - start) * 1000, 2)

        if response.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "http_request_failed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
        else:
            logger.info(
                "http_request",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
    finally:
        clear_context()


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:  # noqa: PLR2004
        logger.warning("request_failed", error=exc.message, status_code=int(exc.status_code))
    return JSONResponse(
        status_code=int(exc.status_code),
        content={"success": False, "error": exc.message, **exc.extra},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request: " + "; ".join(problems)},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "http_request_exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    content = {"success": False, "error": UNEXPECTED_ERROR_MESSAGE}
    if get_settings().is_development:
        content["details"] = "".join(traceback.format_exception(exc))
    return JSONResponse(status_code=500, content=content)


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "SaaS Factory API",
        "version": __version__,
        "description": "Generate, share and deploy scaffolded SaaS projects",
    }


app.include_router(routers.health.router)
# Fixed /projects/... paths go before /projects/{project_id}
app.include_router(routers.generation.router, prefix="/api")
app.include_router(routers.favorites.router, prefix="/api")
app.include_router(routers.projects.router, prefix="/api")
app.include_router(routers.shares.router, prefix="/api")
app.include_router(routers.shares.shared_router, prefix="/api")
app.include_router(routers.collaborators.router, prefix="/api")
app.include_router(routers.deploy.router, prefix="/api")
app.include_router(routers.monitoring.router, prefix="/api")
app.include_router(routers.analytics.router, prefix="/api")
app.include_router(routers.categories.router, prefix="/api")
app.include_router(routers.templates.router, prefix="/api")
