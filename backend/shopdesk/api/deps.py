"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from shopdesk.core.container import ServiceContainer, get_container
from shopdesk.core.errors import Forbidden
from shopdesk.schemas.common import PaginationQuerySchema
from shopdesk.services._shared.ports.token_codec import Principal

F = TypeVar("F", bound=Callable[..., Any])

REFRESH_TOKEN_HEADER = "X-Refresh-Token"


@dataclass(slots=True)
class Pagination:
    """Container holding pagination arguments parsed from the request."""

    page: int
    page_size: int


def parse_pagination(default_page_size: int = 10, max_page_size: int = 100) -> Pagination:
    """Parse ``page``/``page_size`` from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(
        default_page_size=default_page_size, max_page_size=max_page_size
    )
    data = schema.load(request.args)
    return Pagination(page=data["page"], page_size=data["page_size"])


def request_payload() -> dict[str, Any]:
    """Return the request body as a plain dict, from JSON or form fields."""

    if request.is_json:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}
    return request.form.to_dict()


def services() -> ServiceContainer:
    """Return the wired services of the current app."""

    return get_container()


def require_auth(func: F) -> F:
    """Authenticate the bearer access token and pass ``principal=`` to the view.

    Runs before the view body. Any failure (missing, malformed, expired,
    wrong class, revoked, store unavailable) aborts the request through the
    registered error handlers, so the view is never entered.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        auth = services().authenticator.authenticate(request.headers.get("Authorization"))
        g.principal = auth.principal
        return func(*args, principal=auth.principal, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: str) -> Callable[[F], F]:
    """Like :func:`require_auth`, then demand at least one of ``roles``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def guarded(*args: Any, principal: Principal, **kwargs: Any):
            if not principal.has_any_role(*roles):
                raise Forbidden("Insufficient role")
            return func(*args, principal=principal, **kwargs)

        return require_auth(guarded)  # type: ignore[return-value]

    return decorator


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
