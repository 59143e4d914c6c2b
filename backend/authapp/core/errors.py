"""RFC 7807 (``application/problem+json``) error responses for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from authapp.core.logger import ensure_request_id
from authapp.services._shared.errors import (
    ConflictError,
    IdentityProviderError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    StoreUnavailableError,
)

log = logging.getLogger(__name__)


def problem_response(
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """
    Build a problem+json response.

    :param status: HTTP status code.
    :param code: Stable machine-readable error code.
    :param message: Client-safe summary, sent as ``detail``.
    :param details: Optional structured payload (e.g. field errors).
    :returns: ``(response, status)`` tuple for Flask.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    resp = jsonify(body)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """
    Error raised by API code and rendered as a problem response.

    :param message: Human-readable description presented to clients.
    :param status_code: HTTP status (``400`` by default).
    :param code: Machine-readable identifier.
    :param details: Optional structured payload.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    code: str = "bad_request"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = int(status_code)
        if code is not None:
            self.code = code
        self.details = details or {}


class BadRequest(APIError):
    """400 for malformed input or rejected identity-provider tokens."""


class NotFound(APIError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT
    code = "conflict"


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "unauthorized"


class ServiceUnavailable(APIError):
    """503 when a backing store fails outside the session check."""

    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    code = "service_unavailable"


class SessionRejected(Unauthorized):
    """
    401 produced by the session decision engine.

    :param code: Rejection kind (``unauthenticated``, ``session_expired``,
        ``unavailable`` or ``malformed``).
    :param message: Client-facing explanation.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message, code=code)


def translate_service_error(exc: ServiceError) -> APIError:
    """Map a framework-agnostic service error to its HTTP counterpart."""
    if isinstance(exc, NotFoundError):
        return NotFound(str(exc))
    if isinstance(exc, ConflictError):
        return Conflict(str(exc))
    if isinstance(exc, InvalidCredentialsError):
        return Unauthorized(str(exc))
    if isinstance(exc, IdentityProviderError):
        return BadRequest(str(exc))
    if isinstance(exc, StoreUnavailableError):
        return ServiceUnavailable("Service temporarily unavailable")
    return BadRequest(str(exc))


def init_app(app: Flask) -> None:
    """
    Attach problem+json handlers to the Flask app.

    4xx are logged as warnings, 5xx as errors with the traceback where one
    exists. Raw database and token errors never reach the client.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level("api_error", extra={"code": err.code, "status": err.status_code})
        return problem_response(err.status_code, err.code, err.message, err.details or None)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        return handle_api_error(translate_service_error(err))

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        log.warning("validation_error")
        return problem_response(
            HTTPStatus.BAD_REQUEST,
            "validation_error",
            "Invalid request",
            {"errors": err.messages},
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = HTTPStatus(status).phrase.lower().replace(" ", "_").replace("-", "_")
        message = err.description or HTTPStatus(status).phrase
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        (log.error if status >= 500 else log.warning)("http_error", extra={"status": status})
        return problem_response(status, code, message)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        log.error("integrity_error", exc_info=True)
        return problem_response(HTTPStatus.CONFLICT, "conflict", "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("database_unavailable", exc_info=True)
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
            "Service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled_exception", exc_info=True)
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"
        )
