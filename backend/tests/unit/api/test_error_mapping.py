"""Service errors must reach clients as stable problem+json responses."""

from __future__ import annotations

import pytest
from shopdesk.core.errors import APIError
from shopdesk.services._shared.base import BaseService
from shopdesk.services._shared.errors import (
    AuthorizationError,
    BadCredentialError,
    DuplicateEmailError,
    InvalidSignatureError,
    MalformedTokenError,
    MissingCredentialsError,
    MissingInputError,
    NotFoundError,
    StoreUnavailableError,
    TokenExpiredError,
    TokenRevokedError,
    UnknownEmailError,
    ValidationFailedError,
    WrongTokenClassError,
)

from tests.helpers.http import assert_problem


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (MissingCredentialsError(), 401, "missing_token"),
        (MalformedTokenError(), 401, "malformed_token"),
        (InvalidSignatureError(), 401, "invalid_signature"),
        (TokenExpiredError(), 401, "token_expired"),
        (WrongTokenClassError(), 401, "wrong_token_class"),
        (TokenRevokedError(), 401, "token_revoked"),
        (BadCredentialError(), 401, "bad_credential"),
        (UnknownEmailError(), 404, "unknown_email"),
        (NotFoundError("Shop", 1), 404, "not_found"),
        (DuplicateEmailError(), 409, "duplicate_email"),
        (AuthorizationError(), 403, "forbidden"),
        (MissingInputError("Both tokens are required"), 400, "missing_input"),
        (ValidationFailedError(), 400, "validation_failed"),
        (StoreUnavailableError(), 500, "store_unavailable"),
    ],
)
def test_translate_exceptions(exc, status, code):
    translated = BaseService.translate_exceptions(exc)

    assert isinstance(translated, APIError)
    assert translated.status_code == status
    assert translated.code == code


def test_unrelated_exceptions_pass_through():
    exc = KeyError("x")
    assert BaseService.translate_exceptions(exc) is exc


@pytest.fixture()
def raising_client(app):
    """Client for a throwaway route raising whatever the test puts in ``box``."""
    box: dict[str, Exception] = {}

    @app.get("/_raise")
    def _raise():
        raise box["exc"]

    return app.test_client(), box


def test_authentication_failures_carry_bearer_challenge(raising_client):
    client, box = raising_client
    box["exc"] = TokenExpiredError()

    resp = client.get("/_raise")

    assert_problem(resp, 401, "token_expired")
    assert resp.headers["WWW-Authenticate"] == 'Bearer error="invalid_token"'


def test_store_outage_is_retriable(raising_client):
    client, box = raising_client
    box["exc"] = StoreUnavailableError()

    body = assert_problem(client.get("/_raise"), 500, "store_unavailable")

    assert body["details"] == {"retriable": True}


def test_field_errors_are_exposed(raising_client):
    client, box = raising_client
    box["exc"] = ValidationFailedError("Validation failed", {"confirm_password": ["Passwords do not match."]})

    body = assert_problem(client.get("/_raise"), 400, "validation_failed")

    assert body["details"]["errors"]["confirm_password"] == ["Passwords do not match."]


def test_unexpected_errors_do_not_leak(raising_client):
    client, box = raising_client
    box["exc"] = RuntimeError("secret internals")

    body = assert_problem(client.get("/_raise"), 500, "internal_server_error")

    assert "secret" not in body["detail"]


def test_unknown_route_is_problem_json(client):
    body = assert_problem(client.get("/api/v1/nope"), 404, "not_found")
    assert "/api/v1/nope" in body["detail"]


def test_request_id_is_echoed(client):
    resp = client.get("/api/v1/nope", headers={"X-Request-ID": "req-42"})

    assert resp.headers["X-Request-ID"] == "req-42"
    assert resp.get_json()["request_id"] == "req-42"
