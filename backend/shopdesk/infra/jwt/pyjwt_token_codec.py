"""PyJWT-backed implementation of the :class:`TokenCodec` port."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import jwt

from shopdesk.services._shared.errors import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
    WrongTokenClassError,
)
from shopdesk.services._shared.ports.token_codec import (
    IssuedToken,
    Principal,
    TokenClaims,
    TokenClass,
)
from shopdesk.services.auth.dto import AuthTokenConfig

REQUIRED_CLAIMS = ["jti", "sub", "type", "sid", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PyJWTTokenCodec:
    """
    Sign and verify session tokens with per-class HMAC keys.

    Decoding order:

    1. parse the payload without trusting it, only to learn the claimed class;
    2. verify the signature with *that* class's key (algorithm pinned);
    3. compare the verified class with the expected one;
    4. check ``exp`` against the clock with zero leeway.

    Step 3 runs on a verified payload, so a valid refresh token shown to an
    access-only gate yields :class:`WrongTokenClassError`, never a signature error.
    """

    def __init__(self, cfg: AuthTokenConfig, *, clock: Callable[[], datetime] = _utcnow) -> None:
        """
        :param cfg: Immutable secrets/TTLs configuration.
        :param clock: Source of aware UTC datetimes (injectable for tests).
        """
        self.cfg = cfg
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue(
        self, principal: Principal, token_class: TokenClass, *, session_id: str
    ) -> IssuedToken:
        issued_at = self.now().replace(microsecond=0)
        expires_at = issued_at + self.cfg.ttl_for(token_class)
        claims = TokenClaims(
            jti=uuid.uuid4().hex,
            subject=principal.id,
            roles=tuple(sorted(principal.roles)),
            token_class=token_class,
            session_id=session_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        payload: dict[str, Any] = {
            "jti": claims.jti,
            "sub": claims.subject,
            "roles": list(claims.roles),
            "type": token_class.value,
            "sid": session_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        value = jwt.encode(payload, self.cfg.secret_for(token_class), algorithm=self.cfg.algorithm)
        return IssuedToken(value=value, claims=claims)

    # ------------------------------------------------------------------ #
    # Decode
    # ------------------------------------------------------------------ #

    def decode(self, raw: str | None, expected: TokenClass) -> TokenClaims:
        if not raw or not isinstance(raw, str):
            raise MalformedTokenError()

        try:
            unverified = jwt.decode(raw, options={"verify_signature": False})
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError() from exc

        try:
            claimed = TokenClass(unverified.get("type"))
        except ValueError as exc:
            raise MalformedTokenError("Token type is unknown") from exc

        try:
            payload = jwt.decode(
                raw,
                self.cfg.secret_for(claimed),
                algorithms=[self.cfg.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignatureError() from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError() from exc

        claims = self._to_claims(payload)
        if claims.token_class is not expected:
            raise WrongTokenClassError(
                f"Wrong token type: {expected.value} token required"
            )
        if self.now() >= claims.expires_at:
            raise TokenExpiredError(f"{expected.value.capitalize()} token has expired")
        return claims

    @staticmethod
    def _to_claims(payload: dict[str, Any]) -> TokenClaims:
        iat, exp = payload["iat"], payload["exp"]
        roles = payload.get("roles", [])
        if (
            not all(isinstance(v, int) and not isinstance(v, bool) for v in (iat, exp))
            or not isinstance(roles, list)
            or not all(isinstance(r, str) for r in roles)
            or not all(isinstance(payload[k], str) for k in ("jti", "sub", "sid"))
        ):
            raise MalformedTokenError("Token claims have invalid types")
        return TokenClaims(
            jti=payload["jti"],
            subject=payload["sub"],
            roles=tuple(roles),
            token_class=TokenClass(payload["type"]),
            session_id=payload["sid"],
            issued_at=datetime.fromtimestamp(iat, UTC),
            expires_at=datetime.fromtimestamp(exp, UTC),
        )
