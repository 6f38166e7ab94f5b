"""Error taxonomy and the handlers that turn it into JSON responses.

Lower layers raise (or return ``None``); routes wrap their work in
``error_boundary`` so that anything unexpected becomes the operation's own
500 message. Response bodies always carry either ``error`` or ``errors``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..middlewares.cors_headers import CORS_HEADERS

logger = logging.getLogger(__name__)

ZIP_NOT_FOUND_MESSAGE = "Zip code not found on OpenWeatherMap API."


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class UserValidationError(ApiError):
    """The submitted user record is malformed; lists every failed rule."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)

    def to_payload(self) -> dict[str, Any]:
        return {"errors": self.errors}


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class ZipNotFoundError(BadRequestError):
    """The weather provider has no location for the ZIP code."""

    def __init__(self, zip_code: str | None = None) -> None:
        super().__init__(ZIP_NOT_FOUND_MESSAGE)
        self.zip_code = zip_code


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(ApiError):
    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.details is not None:
            payload["details"] = self.details
        return payload


class UpstreamLookupError(Exception):
    """A lookup provider was unreachable or answered with an unexpected failure."""


class LookupNotConfigured(UpstreamLookupError):
    """Raised when a lookup provider's credentials are missing."""


@contextmanager
def error_boundary(operation: str, message: str, *, include_details: bool = False) -> Iterator[None]:
    """Translate unexpected failures inside a route into ``InternalError``."""

    try:
        yield
    except ApiError:
        raise
    except Exception as exc:
        logger.exception("%s failed", operation, extra={"extra_data": {"operation": operation}})
        raise InternalError(message, details=str(exc) if include_details else None) from exc


def error_response(status_code: int, payload: dict[str, Any]) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=dict(CORS_HEADERS))


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.to_payload())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed."
    return error_response(exc.status_code, {"error": detail})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": "Internal server error."})
