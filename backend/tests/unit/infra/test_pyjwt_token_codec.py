# tests/unit/infra/test_pyjwt_token_codec.py
"""
Unit tests for PyJWTTokenCodec.

Covered:
- issue/decode round trip and the ``exp - iat == ttl`` invariant
- zero-grace expiry at the exact boundary
- class confusion with a valid signature
- tampered, forged and unsigned tokens
- malformed input and missing claims
"""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from shopdesk.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from shopdesk.services._shared.errors import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
    WrongTokenClassError,
)
from shopdesk.services._shared.ports.token_codec import Principal, TokenClass
from shopdesk.services.auth.dto import AuthTokenConfig

from tests.helpers.clock import ManualClock

ACCESS_SECRET = "unit-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-secret-0123456789abcdef"
NO_TIME_CHECKS = {"verify_exp": False, "verify_iat": False, "verify_nbf": False}


@pytest.fixture
def cfg() -> AuthTokenConfig:
    return AuthTokenConfig(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_expires=timedelta(minutes=15),
        refresh_expires=timedelta(days=7),
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def codec(cfg, clock) -> PyJWTTokenCodec:
    return PyJWTTokenCodec(cfg, clock=clock)


@pytest.fixture
def principal() -> Principal:
    return Principal.of(42, ["user", "admin"])


# ------------------------------ Round trip -------------------------------- #
@pytest.mark.parametrize("token_class", [TokenClass.ACCESS, TokenClass.REFRESH])
def test_issue_then_decode_returns_same_claims(codec, cfg, principal, token_class):
    issued = codec.issue(principal, token_class, session_id="sid-1")

    claims = codec.decode(issued.value, token_class)

    assert claims == issued.claims
    assert claims.subject == "42"
    assert claims.roles == ("admin", "user")
    assert claims.session_id == "sid-1"
    assert claims.principal == principal
    assert claims.expires_at - claims.issued_at == cfg.ttl_for(token_class)


def test_issued_at_is_truncated_to_whole_seconds(codec, clock, principal):
    clock.current = clock.current.replace(microsecond=654321)

    issued = codec.issue(principal, TokenClass.ACCESS, session_id="s")

    assert issued.claims.issued_at.microsecond == 0
    assert codec.decode(issued.value, TokenClass.ACCESS) == issued.claims


def test_each_issue_gets_a_fresh_jti(codec, principal):
    a = codec.issue(principal, TokenClass.ACCESS, session_id="s")
    b = codec.issue(principal, TokenClass.ACCESS, session_id="s")
    assert a.claims.jti != b.claims.jti


def test_classes_are_signed_with_their_own_keys(codec, principal):
    access = codec.issue(principal, TokenClass.ACCESS, session_id="s").value
    refresh = codec.issue(principal, TokenClass.REFRESH, session_id="s").value

    jwt.decode(access, ACCESS_SECRET, algorithms=["HS256"], options=NO_TIME_CHECKS)
    jwt.decode(refresh, REFRESH_SECRET, algorithms=["HS256"], options=NO_TIME_CHECKS)
    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(access, REFRESH_SECRET, algorithms=["HS256"], options=NO_TIME_CHECKS)


# -------------------------------- Expiry ---------------------------------- #
def test_token_is_valid_one_second_before_expiry(codec, clock, principal):
    issued = codec.issue(principal, TokenClass.ACCESS, session_id="s")
    clock.advance(minutes=15, seconds=-1)

    assert codec.decode(issued.value, TokenClass.ACCESS).jti == issued.claims.jti


def test_token_expires_exactly_at_exp(codec, clock, principal):
    issued = codec.issue(principal, TokenClass.ACCESS, session_id="s")
    clock.advance(minutes=15)

    with pytest.raises(TokenExpiredError):
        codec.decode(issued.value, TokenClass.ACCESS)


def test_refresh_outlives_access(codec, clock, principal):
    access = codec.issue(principal, TokenClass.ACCESS, session_id="s").value
    refresh = codec.issue(principal, TokenClass.REFRESH, session_id="s").value
    clock.advance(hours=1)

    with pytest.raises(TokenExpiredError):
        codec.decode(access, TokenClass.ACCESS)
    assert codec.decode(refresh, TokenClass.REFRESH).token_class is TokenClass.REFRESH


# ----------------------------- Wrong class -------------------------------- #
def test_refresh_token_presented_as_access_is_wrong_class(codec, principal):
    refresh = codec.issue(principal, TokenClass.REFRESH, session_id="s").value

    with pytest.raises(WrongTokenClassError):
        codec.decode(refresh, TokenClass.ACCESS)


def test_access_token_presented_as_refresh_is_wrong_class(codec, principal):
    access = codec.issue(principal, TokenClass.ACCESS, session_id="s").value

    with pytest.raises(WrongTokenClassError):
        codec.decode(access, TokenClass.REFRESH)


def test_wrong_class_wins_over_expiry(codec, clock, principal):
    """A verified payload of the wrong class is reported as such even once expired."""
    access = codec.issue(principal, TokenClass.ACCESS, session_id="s").value
    clock.advance(days=1)

    with pytest.raises(WrongTokenClassError):
        codec.decode(access, TokenClass.REFRESH)


# --------------------------- Signature checks ----------------------------- #
def test_tampered_signature_is_rejected(codec, principal):
    value = codec.issue(principal, TokenClass.ACCESS, session_id="s").value
    header, payload, signature = value.split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

    with pytest.raises(InvalidSignatureError):
        codec.decode(f"{header}.{payload}.{flipped}", TokenClass.ACCESS)


def test_access_signed_token_relabelled_as_refresh_is_rejected(codec, clock):
    """Claiming the refresh class does not help a token signed with the access key."""
    now = int(clock().timestamp())
    forged = jwt.encode(
        {"jti": "j", "sub": "1", "roles": [], "type": "refresh", "sid": "s",
         "iat": now, "exp": now + 60},
        ACCESS_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidSignatureError):
        codec.decode(forged, TokenClass.REFRESH)


def test_token_signed_with_foreign_key_is_rejected(codec, clock):
    now = int(clock().timestamp())
    foreign = jwt.encode(
        {"jti": "j", "sub": "1", "roles": [], "type": "access", "sid": "s",
         "iat": now, "exp": now + 60},
        "some-other-secret-0123456789abcdefgh",
        algorithm="HS256",
    )

    with pytest.raises(InvalidSignatureError):
        codec.decode(foreign, TokenClass.ACCESS)


def test_unsigned_token_is_rejected(codec, clock):
    now = int(clock().timestamp())
    unsigned = jwt.encode(
        {"jti": "j", "sub": "1", "roles": [], "type": "access", "sid": "s",
         "iat": now, "exp": now + 60},
        None,
        algorithm="none",
    )

    with pytest.raises(InvalidSignatureError):
        codec.decode(unsigned, TokenClass.ACCESS)


# ------------------------------ Malformed --------------------------------- #
@pytest.mark.parametrize("raw", [None, "", "not-a-token", "a.b.c", "....", 123])
def test_garbage_is_malformed(codec, raw):
    with pytest.raises(MalformedTokenError):
        codec.decode(raw, TokenClass.ACCESS)


def test_unknown_type_is_malformed(codec, clock):
    now = int(clock().timestamp())
    value = jwt.encode(
        {"jti": "j", "sub": "1", "type": "id", "sid": "s", "iat": now, "exp": now + 60},
        ACCESS_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(MalformedTokenError):
        codec.decode(value, TokenClass.ACCESS)


@pytest.mark.parametrize("missing", ["jti", "sub", "sid", "iat", "exp"])
def test_missing_required_claim_is_malformed(codec, clock, missing):
    now = int(clock().timestamp())
    payload = {"jti": "j", "sub": "1", "roles": [], "type": "access", "sid": "s",
               "iat": now, "exp": now + 60}
    payload.pop(missing)
    value = jwt.encode(payload, ACCESS_SECRET, algorithm="HS256")

    with pytest.raises(MalformedTokenError):
        codec.decode(value, TokenClass.ACCESS)


def test_non_string_roles_are_malformed(codec, clock):
    now = int(clock().timestamp())
    value = jwt.encode(
        {"jti": "j", "sub": "1", "roles": [1, 2], "type": "access", "sid": "s",
         "iat": now, "exp": now + 60},
        ACCESS_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(MalformedTokenError):
        codec.decode(value, TokenClass.ACCESS)
