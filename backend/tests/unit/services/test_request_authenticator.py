# tests/unit/services/test_request_authenticator.py
"""RequestAuthenticator against a real codec and an in-memory store (no database)."""

from __future__ import annotations

from datetime import timedelta

import pytest
from shopdesk.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from shopdesk.services._shared.errors import (
    InvalidSignatureError,
    MalformedTokenError,
    MissingCredentialsError,
    StoreUnavailableError,
    TokenExpiredError,
    TokenRevokedError,
    WrongTokenClassError,
)
from shopdesk.services._shared.ports.revocation_store import InMemoryRevocationStore
from shopdesk.services._shared.ports.token_codec import Principal, TokenClass
from shopdesk.services.auth.authenticator import RequestAuthenticator, extract_bearer
from shopdesk.services.auth.dto import AuthTokenConfig
from shopdesk.services.auth.keys import jti_key, sid_key

from tests.helpers.clock import ManualClock


def _cfg(access_secret: str = "unit-access-secret-0123456789abcdef") -> AuthTokenConfig:
    return AuthTokenConfig(
        access_secret=access_secret,
        refresh_secret="unit-refresh-secret-0123456789abcdef",
        access_expires=timedelta(minutes=1),
        refresh_expires=timedelta(minutes=10),
    )


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def codec(clock):
    return PyJWTTokenCodec(_cfg(), clock=clock)


@pytest.fixture()
def store(clock):
    return InMemoryRevocationStore(clock=clock.epoch)


@pytest.fixture()
def auth(codec, store):
    return RequestAuthenticator(codec=codec, store=store)


@pytest.fixture()
def principal():
    return Principal.of(7, ["user"])


def _access(codec, principal, sid="s1") -> str:
    return codec.issue(principal, TokenClass.ACCESS, session_id=sid).value


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Bearer", None),
        ("Bearer   ", None),
        ("Basic abc", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("  Bearer abc  ", "abc"),
    ],
)
def test_extract_bearer(header, expected):
    assert extract_bearer(header) == expected


def test_valid_token_yields_principal(auth, codec, principal):
    token = _access(codec, principal)

    result = auth.authenticate(f"Bearer {token}")

    assert result.principal == principal
    assert result.raw_token == token
    assert result.claims.session_id == "s1"


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer "])
def test_missing_bearer(auth, header):
    with pytest.raises(MissingCredentialsError):
        auth.authenticate(header)


def test_refresh_token_is_not_accepted(auth, codec, principal):
    token = codec.issue(principal, TokenClass.REFRESH, session_id="s1").value
    with pytest.raises(WrongTokenClassError):
        auth.authenticate(f"Bearer {token}")


def test_expired_token(auth, codec, clock, principal):
    token = _access(codec, principal)
    clock.advance(minutes=1)
    with pytest.raises(TokenExpiredError):
        auth.authenticate(f"Bearer {token}")


def test_foreign_signature(auth, clock, principal):
    other = PyJWTTokenCodec(_cfg("another-access-secret-0123456789abcdef"), clock=clock)
    with pytest.raises(InvalidSignatureError):
        auth.authenticate(f"Bearer {_access(other, principal)}")


def test_garbage_token(auth):
    with pytest.raises(MalformedTokenError):
        auth.authenticate("Bearer not-a-jwt")


def test_revoked_jti(auth, codec, store, principal):
    token = _access(codec, principal)
    jti = codec.decode(token, TokenClass.ACCESS).jti
    store.mark_revoked(jti_key(jti), 60, reason="logout")

    with pytest.raises(TokenRevokedError):
        auth.authenticate(f"Bearer {token}")


def test_revoked_session(auth, codec, store, principal):
    token = _access(codec, principal, sid="gone")
    store.mark_revoked(sid_key("gone"), 60, reason="logout")

    with pytest.raises(TokenRevokedError):
        auth.authenticate(f"Bearer {token}")


def test_store_outage_rejects_request(auth, codec, store, principal):
    token = _access(codec, principal)
    store.available = False

    with pytest.raises(StoreUnavailableError):
        auth.authenticate(f"Bearer {token}")
