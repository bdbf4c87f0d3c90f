from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .core.config import get_settings
from .core.errors import ProxyError, error_payload
from .routers.ea import router as ea_router
from .routers.health import router as health_router


def _configure_logging() -> logging.Logger:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("proclubs_proxy")


logger = _configure_logging()
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    request_id = f"req_{uuid.uuid4().hex[:12]}"
    request.state.request_id = request_id
    started_at = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as exc:
        elapsed_ms = (time.perf_counter() - started_at) * 1000
        logger.exception(
            "request_failed method=%s path=%s request_id=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            request_id,
            elapsed_ms,
        )
        response = JSONResponse(
            status_code=500,
            content=error_payload("Internal server error.", details=type(exc).__name__),
        )

    response.headers["X-Request-Id"] = request_id
    elapsed_ms = (time.perf_counter() - started_at) * 1000
    log = logger.error if response.status_code >= 500 else logger.info
    log(
        "request method=%s path=%s status=%s request_id=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        request_id,
        elapsed_ms,
    )
    return response


@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:  # type: ignore[no-untyped-def]
    logger.warning(
        "proxy_error status=%s path=%s request_id=%s",
        exc.status,
        request.url.path,
        getattr(request.state, "request_id", "-"),
    )
    return JSONResponse(status_code=exc.status, content=error_payload(exc.message, exc.details))


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:  # type: ignore[no-untyped-def]
    message = str(exc.detail) if exc.detail else "HTTP error."
    return JSONResponse(status_code=exc.status_code, content=error_payload(message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:  # type: ignore[no-untyped-def]
    logger.exception(
        "unhandled_error path=%s request_id=%s",
        request.url.path,
        getattr(request.state, "request_id", "-"),
    )
    return JSONResponse(status_code=500, content=error_payload("Internal server error."))


app.include_router(health_router)
app.include_router(ea_router)
