"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shopdesk.models.user import User
from shopdesk.services._shared.dto import PageMeta

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for an administrator editing an account.

    :param name: New display name.
    :type name: str
    """

    name: str


@dataclass(frozen=True, slots=True)
class UserSearchIn:
    """
    Input DTO for the admin user listing.

    :param page: 1-based page number.
    :param page_size: Items per page.
    :param name: Optional case-insensitive substring of the name.
    """

    page: int = 1
    page_size: int = 10
    name: str | None = None


@dataclass(frozen=True, slots=True)
class AdminCreateIn:
    """
    Input DTO for the admin bootstrap command.

    :param name: Display name.
    :param email: Login email; an existing account with it gets promoted.
    :param password: Raw password, only used when the account is created.
    """

    name: str
    email: str
    password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe view of a user (no password hash).

    :param id: User id.
    :param name: Display name.
    :param email: Login email.
    :param roles: Role names.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: int
    name: str
    email: str
    roles: tuple[str, ...]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            roles=tuple(user.roles or ()),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class UserPageOut:
    """
    One page of users.

    :param items: Users on this page.
    :param meta: Pagination metadata.
    """

    items: list[UserPublicOut]
    meta: PageMeta
