from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from backend.app.api.greeting import router as greeting_router
from backend.app.api.health import router as health_router
from backend.app.config.settings import settings
from backend.app.core.errors import APIError, error_body
from backend.app.core.logging import request_id_var, setup_logging

setup_logging(level=settings.log_level, json_output=settings.log_json)
logger = logging.getLogger("backend")


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _status_code_name(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).name
    except ValueError:
        return "HTTP_ERROR"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_var.reset(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        latency = time.perf_counter() - start_time
        route = getattr(request.scope.get("route"), "path", request.url.path)

        logger.info(
            "Request completed",
            extra={
                "request_id": _request_id(request),
                "method": request.method,
                "route": route,
                "status": response.status_code,
                "latency_ms": round(latency * 1000, 2),
            },
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = _request_id(request)
    if isinstance(exc.detail, dict):
        detail = exc.detail
    else:
        detail = {"code": _status_code_name(exc.status_code), "message": str(exc.detail)}
    logger.warning(
        "HTTPException",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_code": detail.get("code"),
            "error_message": detail.get("message"),
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            detail.get("code", "HTTP_ERROR"),
            detail.get("message", "Request failed"),
            request_id,
        ),
        headers=getattr(exc, "headers", None),
    )


async def api_error_handler(request: Request, exc: APIError):
    request_id = _request_id(request)
    logger.warning(
        "APIError",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_code": exc.code,
            "error_message": exc.message,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, request_id, exc.detail),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    logger.warning(
        "RequestValidationError",
        extra={"request_id": request_id, "path": request.url.path},
    )
    return JSONResponse(
        status_code=400,
        content=error_body("VALIDATION_ERROR", "Invalid request", request_id, exc.errors()),
    )


async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error(
        "Unhandled exception",
        extra={"request_id": request_id, "method": request.method, "path": request.url.path},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content=error_body("INTERNAL_ERROR", "An internal error occurred", request_id),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Service starting",
        extra={
            "host": settings.host,
            "port": settings.port,
            "greeting": settings.greeting,
            "environment": settings.environment,
        },
    )
    yield
    logger.info("Service stopping")


def create_app() -> FastAPI:
    app = FastAPI(title="Hello World Service", version=settings.app_version, lifespan=lifespan)

    app.add_middleware(SecurityHeadersMiddleware)
    app.include_router(greeting_router)
    app.include_router(health_router)

    # Added last so the request id is bound before the logging middleware runs.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    return app


app = create_app()
