"""User model definition."""

from __future__ import annotations

from sqlalchemy import JSON, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from shopdesk.core.extensions import db

from .base import NamedMixin, PKMixin, ReprMixin, TimestampMixin

ROLE_USER = "user"
ROLE_ADMIN = "admin"
KNOWN_ROLES = frozenset({ROLE_USER, ROLE_ADMIN})


class User(PKMixin, ReprMixin, TimestampMixin, NamedMixin, db.Model):
    """
    Account identity and its role set.

    Fields
    ------
    name : str
        Display name, 3..30 characters.
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password_hash : str
        Output of the configured adaptive hash; never the raw password.
    roles : list[str]
        Role names copied into every token issued for this user.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    roles: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=lambda: [ROLE_USER]
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_name", "name"),
    )

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in (self.roles or [])

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("roles")
    def _validate_roles(self, key: str, value: list[str]) -> list[str]:
        roles = sorted({str(r) for r in value or []})
        unknown = set(roles) - KNOWN_ROLES
        if unknown:
            raise ValueError(f"Unknown roles: {sorted(unknown)}")
        return roles or [ROLE_USER]
