"""Password hashing and verification."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from shopdesk.models.user import User
from shopdesk.services._shared.errors import BadCredentialError
from shopdesk.services._shared.ports.token_codec import Principal

DEFAULT_HASH_METHOD = "scrypt:32768:8:1"


class CredentialVerifier:
    """
    Hash passwords with a configured adaptive scheme and check submitted ones.

    :param method: Werkzeug method string with its cost parameters, e.g.
        ``"scrypt:32768:8:1"`` (N, r, p) or ``"pbkdf2:sha256:600000"``.
    """

    def __init__(self, method: str = DEFAULT_HASH_METHOD) -> None:
        self.method = method

    def hash_password(self, raw: str) -> str:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(raw, method=self.method)

    def verify(self, user: User, raw: str) -> Principal:
        """
        Check ``raw`` against the user's stored hash.

        :param user: Account loaded by email.
        :param raw: Submitted password.
        :returns: The verified principal (id + roles).
        :raises BadCredentialError: On mismatch or an unusable stored hash.
        """
        if not user.password_hash or not check_password_hash(user.password_hash, raw):
            raise BadCredentialError()
        return Principal.of(user.id, user.roles or [])
