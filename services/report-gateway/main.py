"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from ddtrace import patch
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from report_common.logging import setup_logging
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from dependencies import get_config, init_resources
from exceptions import ConfigurationMissingError
from response_models import ErrorResponse
from routes import health_router, reports_router

logger = setup_logging()

if get_config().tracing_enabled:
    patch(fastapi=True, httpx=True, sqlalchemy=True)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_resources()
    yield


app = FastAPI(title="Report Gateway", lifespan=lifespan)


async def catch_unhandled_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception("Server error", extra={"path": request.url.path})
        return JSONResponse(
            status_code=500,
            content=_error_body("Internal server error", message=str(e)),
        )


# Registered before CORS so it sits inside it and its 500s carry CORS headers.
app.add_middleware(BaseHTTPMiddleware, dispatch=catch_unhandled_errors)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_headers=["Content-Type", "Authorization"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    max_age=86400,
)

app.include_router(health_router)
app.include_router(reports_router)


def _error_body(error: str, message: str | None = None, details=None) -> dict:
    return ErrorResponse(error=error, message=message, details=details).model_dump(
        exclude_none=True
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = exc.detail
    elif exc.status_code == 404:
        content = _error_body("Not found")
    else:
        content = _error_body(str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(ConfigurationMissingError)
async def configuration_missing_handler(request: Request, exc: ConfigurationMissingError):
    logger.error(
        "Server configuration error",
        extra={"setting": exc.setting, "path": request.url.path},
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("Server configuration error", message=str(exc)),
    )