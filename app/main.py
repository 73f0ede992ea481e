from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_app_settings, get_crux_api_settings


def _validate_env() -> None:
    """
    Report configuration problems at startup.

    A missing CrUX API key is not fatal: development mode serves mock
    data, and production requests surface the upstream 4xx as a 500.
    """

    settings = get_app_settings()
    crux_settings = get_crux_api_settings()
    log = logging.getLogger(__name__)

    log.info("Running in %s mode", settings.environment)
    if not crux_settings.api_key:
        log.warning(
            "CRUX_API_KEY is not set. Requests to the Chrome UX Report API will be "
            "rejected upstream%s.",
            "; mock data will be served instead" if settings.is_development else "",
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Answer request-body validation failures with HTTP 400.

    The body carries a fixed ``detail`` message plus the pydantic error
    list under ``errors``.
    """

    logging.getLogger(__name__).info(
        "Rejected request path=%s errors=%d", request.url.path, len(exc.errors())
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body", "errors": _jsonable_errors(exc)},
    )


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Close outbound HTTP clients on shutdown."""
    try:
        yield
    finally:
        from app.services import close_crux_report_service

        close_crux_report_service()
        logging.getLogger(__name__).info("CrUX HTTP clients closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()
    _validate_env()
    settings = get_app_settings()

    application = FastAPI(
        title="CrUX Insights API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(RequestValidationError, _request_validation_handler)

    from app.api.routers import crux_router

    application.include_router(crux_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok", "environment": settings.environment}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
