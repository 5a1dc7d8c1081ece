"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories,
infrastructure adapters and application services.

The translation to HTTP responses (RFC 7807) is handled by
``shopdesk/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.

    Notes
    -----
    SQLite reports the failing columns instead of the constraint name, so the
    column part of the conventional ``uq_<table>_<column>`` name is also tried.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    parts = name.split("_", 2)
    if len(parts) == 3 and parts[0] == "uq":
        return f"{parts[1]}.{parts[2]}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, adapters or domain logic.
    - The API layer translates them to APIError.
    """

    pass


class AuthenticationError(ServiceError):
    """Base class for failures that must answer ``401 Unauthorized``."""

    code = "unauthorized"
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


# --------------------------------------------------------------------------- #
# Input validation
# --------------------------------------------------------------------------- #


class ValidationFailedError(ServiceError):
    """
    Raised for malformed input detected past schema validation.

    :param message: Summary shown to clients.
    :param field_errors: Optional ``{field: [messages]}`` mapping.
    """

    def __init__(
        self, message: str = "Validation failed", field_errors: dict[str, list[str]] | None = None
    ) -> None:
        super().__init__(message)
        self.field_errors = field_errors or {}


class MissingInputError(ValidationFailedError):
    """Raised when a required input (e.g. a token) was not supplied."""


# --------------------------------------------------------------------------- #
# Credentials
# --------------------------------------------------------------------------- #


class BadCredentialError(AuthenticationError):
    """Wrong password (or, when concealment is enabled, unknown email)."""

    code = "bad_credential"
    default_message = "Invalid password"


class UnknownEmailError(ServiceError):
    """
    Raised by login when no account exists for the email.

    Kept distinct from :class:`BadCredentialError` to preserve the documented
    login contract; see ``AUTH_CONCEAL_UNKNOWN_EMAIL``.
    """

    def __init__(self, message: str = "Invalid email") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Tokens
# --------------------------------------------------------------------------- #


class MissingCredentialsError(AuthenticationError):
    """No bearer token on a protected request."""

    code = "missing_token"
    default_message = "Missing bearer token"


class MalformedTokenError(AuthenticationError):
    """The token could not be parsed or lacks required claims."""

    code = "malformed_token"
    default_message = "Token is malformed"


class InvalidSignatureError(AuthenticationError):
    """The token signature does not verify against the class key."""

    code = "invalid_signature"
    default_message = "Token signature is invalid"


class TokenExpiredError(AuthenticationError):
    """The token is past its ``exp`` claim."""

    code = "token_expired"
    default_message = "Token has expired"


class WrongTokenClassError(AuthenticationError):
    """An access token was presented where a refresh token is required, or vice versa."""

    code = "wrong_token_class"
    default_message = "Wrong token type"


class TokenRevokedError(AuthenticationError):
    """The token (or its whole session) has been revoked or already consumed."""

    code = "token_revoked"
    default_message = "Token has been revoked"


# --------------------------------------------------------------------------- #
# Infrastructure
# --------------------------------------------------------------------------- #


class StoreUnavailableError(ServiceError):
    """
    The revocation store could not answer.

    Security checks never proceed on this error; callers may retry.
    """

    retriable = True

    def __init__(self, message: str = "Revocation store unavailable") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Resources
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


class DuplicateEmailError(ConflictError):
    """Registration with an email that already has an account."""

    def __init__(self) -> None:
        super().__init__("User", "email already in use")


class AuthorizationError(ServiceError):
    """The authenticated principal may not perform the operation."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)
