from __future__ import annotations

from dataclasses import dataclass
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nse_dashboard.domain.errors import NseDataError, UpstreamRejectedError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: dict | None = None


def raise_api_error(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
) -> None:
    raise ApiError(status_code=status_code, code=code, message=message, details=details)


def raise_upstream_error(exc: NseDataError, *, message: str) -> None:
    raise_api_error(status_code=502, code=exc.code, message=message, details=upstream_error_details(exc))


def upstream_error_details(exc: NseDataError) -> dict | None:
    """Upstream HTTP status, body preview and reason, whichever are known."""
    details: dict = {}
    if isinstance(exc, (UpstreamUnavailableError, UpstreamRejectedError)) and exc.status_code is not None:
        details["status"] = exc.status_code
    if isinstance(exc, UpstreamRejectedError) and exc.body:
        details["body"] = exc.body
    if exc.detail:
        details["message"] = exc.detail
    return details or None


def install_api_error_handlers(application: FastAPI) -> None:
    @application.exception_handler(ApiError)
    async def _handle_api_error(_, exc: ApiError) -> JSONResponse:  # type: ignore[override]
        # "error" is a plain string; the dashboard renders it as-is.
        error_payload: dict = {
            "error": exc.message,
            "code": exc.code,
        }
        if exc.details is not None:
            error_payload["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=error_payload)

    @application.exception_handler(NseDataError)
    async def _handle_unmapped_upstream_error(request: Request, exc: NseDataError) -> JSONResponse:  # type: ignore[override]
        logger.warning("Unhandled upstream error on %s: %s (%s)", request.url.path, exc.code, exc.detail)
        error_payload: dict = {"error": "Upstream data unavailable", "code": exc.code}
        details = upstream_error_details(exc)
        if details is not None:
            error_payload["details"] = details
        return JSONResponse(status_code=502, content=error_payload)
