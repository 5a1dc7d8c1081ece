# shopdesk/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from shopdesk.services._shared.ports.token_codec import TokenClass
from shopdesk.services.identity.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-service registration.

    :param name: Display name (3..30 chars).
    :type name: str
    :param email: Login email.
    :type email: str
    :param password: Raw password.
    :type password: str
    :param confirm_password: Must equal ``password``.
    :type confirm_password: str
    """

    name: str
    email: str
    password: str
    confirm_password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout. Both tokens of the session are required.

    :param access_token: Encoded access JWT (from the ``Authorization`` header).
    :type access_token: str | None
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str | None
    """

    access_token: str | None
    refresh_token: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT.
    :param expires_in: Access lifetime in seconds.
    :param refresh_expires_in: Refresh lifetime in seconds.
    :param session_id: Identifier shared by both tokens.
    :param token_type: Always ``"Bearer"``.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    refresh_expires_in: int
    session_id: str
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class RegistrationOut:
    """
    Registration result: the created user plus an immediately usable session.

    :param user: Public view of the new user.
    :param tokens: Fresh token pair.
    """

    user: UserPublicOut
    tokens: TokenPairOut


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Immutable token configuration, built once at startup.

    :param access_secret: HMAC key for access tokens.
    :type access_secret: str
    :param refresh_secret: HMAC key for refresh tokens.
    :type refresh_secret: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    :param algorithm: Pinned JWS algorithm.
    :type algorithm: str
    :raises ValueError: On empty/identical secrets or ``access >= refresh``.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta
    refresh_expires: timedelta
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Both token secrets must be set.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets.")
        if self.access_expires.total_seconds() < 1:
            raise ValueError("Access token lifetime must be at least one second.")
        if self.access_expires >= self.refresh_expires:
            raise ValueError("Access token lifetime must be shorter than refresh lifetime.")
        if not self.algorithm.startswith("HS"):
            raise ValueError(f"Unsupported token algorithm: {self.algorithm}")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build from a Flask-style config mapping."""
        return cls(
            access_secret=str(config["JWT_ACCESS_SECRET"]),
            refresh_secret=str(config["JWT_REFRESH_SECRET"]),
            access_expires=timedelta(seconds=int(config["JWT_ACCESS_TTL"])),
            refresh_expires=timedelta(seconds=int(config["JWT_REFRESH_TTL"])),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
        )

    def secret_for(self, token_class: TokenClass) -> str:
        return self.access_secret if token_class is TokenClass.ACCESS else self.refresh_secret

    def ttl_for(self, token_class: TokenClass) -> timedelta:
        return self.access_expires if token_class is TokenClass.ACCESS else self.refresh_expires
