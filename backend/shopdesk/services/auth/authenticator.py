"""Bearer-token gate run before every protected handler."""

from __future__ import annotations

from dataclasses import dataclass

from shopdesk.services._shared.errors import MissingCredentialsError, TokenRevokedError
from shopdesk.services._shared.ports.revocation_store import RevocationStore
from shopdesk.services._shared.ports.token_codec import (
    Principal,
    TokenClaims,
    TokenClass,
    TokenCodec,
)
from shopdesk.services.auth.keys import jti_key, sid_key


@dataclass(frozen=True, slots=True)
class Authentication:
    """
    Outcome of a successful check.

    :param principal: Identity passed to the handler.
    :param claims: Verified access-token claims.
    :param raw_token: The bearer string itself (needed by logout).
    """

    principal: Principal
    claims: TokenClaims
    raw_token: str


def extract_bearer(authorization: str | None) -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, or ``None``."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class RequestAuthenticator:
    """
    Validate the access token of an inbound request.

    Steps: extract the bearer token, decode it as an *access* token, then ask
    the revocation store about both its ``jti`` and its session id. Store
    failures propagate as ``StoreUnavailableError`` (the request is rejected).
    """

    def __init__(self, *, codec: TokenCodec, store: RevocationStore) -> None:
        self.codec = codec
        self.store = store

    def authenticate(self, authorization: str | None) -> Authentication:
        raw = extract_bearer(authorization)
        if raw is None:
            raise MissingCredentialsError()
        claims = self.codec.decode(raw, TokenClass.ACCESS)
        if self.store.is_revoked(jti_key(claims.jti), sid_key(claims.session_id)):
            raise TokenRevokedError("Access token has been revoked")
        return Authentication(principal=claims.principal, claims=claims, raw_token=raw)
