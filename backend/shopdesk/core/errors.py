"""RFC 7807 problem responses for every error that reaches Flask."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from shopdesk.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"
BEARER_CHALLENGE = 'Bearer error="invalid_token"'

# Codes for errors raised by Werkzeug itself (routing, size limits, ...).
HTTP_STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


class APIError(Exception):
    """
    An error with a known HTTP rendering.

    Parameters
    ----------
    message : str
        Client-safe description, rendered as ``detail``.
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Stable snake_case identifier clients can branch on.
    details : dict[str, Any] | None, optional
        Extra structured payload (field errors, ``retriable`` ...).
    headers : dict[str, str] | None, optional
        Extra response headers such as ``WWW-Authenticate``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}
        self.headers = headers or {}

    def to_problem(self) -> dict[str, Any]:
        return problem(self.status_code, self.code, self.message, self.details)


class NotFound(APIError):
    def __init__(self, message: str = "Resource not found", *, code: str = "not_found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code=code)


class Conflict(APIError):
    def __init__(self, message: str = "Conflict", *, code: str = "conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code=code)


class Unauthorized(APIError):
    """401 with the bearer challenge header clients use to drop the token."""

    def __init__(self, message: str = "Unauthorized", *, code: str = "unauthorized") -> None:
        super().__init__(
            message,
            status_code=HTTPStatus.UNAUTHORIZED,
            code=code,
            headers={"WWW-Authenticate": BEARER_CHALLENGE},
        )


class Forbidden(APIError):
    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


def problem(
    status: int, code: str, message: str, details: dict[str, Any] | None = None
) -> dict[str, Any]:
    """
    Build a Problem Details body.

    :param status: HTTP status code.
    :param code: Stable machine-readable code.
    :param message: Client-safe summary (``detail``).
    :param details: Optional structured extras, omitted when empty.
    :returns: Problem dict including ``request_id`` for correlation.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        body["details"] = details
    body["request_id"] = ensure_request_id()
    return body


def _respond(
    body: dict[str, Any],
    headers: dict[str, str] | None = None,
    *,
    exc_info: bool = False,
) -> tuple[Response, int, dict[str, str]]:
    status = body["status"]
    level = logging.ERROR if status >= 500 else logging.WARNING
    log.log(
        level,
        "request.failed code=%s status=%s detail=%s",
        body["code"],
        status,
        body["detail"],
        exc_info=exc_info,
        extra={"status": status},
    )
    resp = jsonify(body)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, status, headers or {}


def init_app(app: Flask) -> None:
    """
    Register the error handlers.

    Service errors are translated by ``BaseService.translate_exceptions``;
    database and unexpected errors never leak driver messages.
    """
    from shopdesk.services._shared.base import BaseService
    from shopdesk.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _respond(err.to_problem(), err.headers)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = BaseService.translate_exceptions(err)
        if not isinstance(translated, APIError):  # pragma: no cover - every ServiceError maps
            raise err
        return handle_api_error(translated)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = HTTP_STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        return _respond(problem(status, code, message))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        body = problem(
            HTTPStatus.BAD_REQUEST,
            "validation_failed",
            "Validation failed",
            {"errors": err.normalized_messages()},
        )
        return _respond(body)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        return _respond(problem(HTTPStatus.CONFLICT, "conflict", "Resource conflict"), exc_info=True)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        body = problem(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "database_unavailable",
            "Database temporarily unavailable",
            {"retriable": True},
        )
        return _respond(body, exc_info=True)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        body = problem(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error")
        return _respond(body, exc_info=True)
