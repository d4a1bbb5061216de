"""Exception types and handlers shared by every route."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("presenter.errors")


class PresenterError(Exception):
    """Base class for failures reported to the client as JSON."""

    status_code = 500
    error_code = "presenter_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": self.message}


class ConfigurationMissing(PresenterError):
    """A provider credential or identifier required by the request is unset."""

    status_code = 400
    error_code = "configuration_missing"

    def __init__(self, setting: str, provider: str) -> None:
        super().__init__(f"{provider} is not configured: {setting.upper()} is unset")
        self.setting = setting
        self.provider = provider


class BadRequest(PresenterError):
    status_code = 400
    error_code = "bad_request"


class UnknownSession(BadRequest):
    """A request named a session id that was never started or has been evicted."""

    error_code = "unknown_session"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Unknown sessionId {session_id!r}; start one with POST /avatar/session")
        self.session_id = session_id


class UpstreamFailure(PresenterError):
    """An external provider call failed or timed out."""

    status_code = 502
    error_code = "upstream_failure"

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        upstream_status: int | None = None,
        upstream_body: Any = None,
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["provider"] = self.provider
        payload["upstream_status"] = self.upstream_status
        payload["upstream_body"] = self.upstream_body
        return payload


class ClassificationParseFailure(PresenterError):
    """The model returned a decision that does not match the expected shape."""

    status_code = 502
    error_code = "classification_parse_failure"

    def __init__(self, message: str, raw_output: str | None = None) -> None:
        super().__init__(message)
        self.raw_output = raw_output


async def presenter_error_handler(request: Request, exc: PresenterError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    else:
        logger.info("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    """Return a generic JSON error response while logging the exception."""

    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "Something unexpected happened. Please try again later.",
        },
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report unreadable or non-object bodies in the same shape as ``BadRequest``."""

    errors = exc.errors()
    if errors and errors[0].get("type") == "json_invalid":
        message = "Request body is not valid JSON"
    else:
        message = "Request body must be a JSON object"
    logger.info("bad_request on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": BadRequest.error_code, "message": message})
