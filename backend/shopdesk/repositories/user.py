"""User repository for persistence-only lookups."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Select, select

from shopdesk.models.user import User
from shopdesk.repositories.base import BaseRepository, Page, Pagination, escape_like


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes or verifies passwords and NEVER issues tokens.
    """

    model = User

    def _sortable_fields(self):
        return {
            "id": User.id,
            "name": User.name,
            "email": User.email,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {"email": User.email}

    def _updatable_fields(self):
        """Publicly allowed updatable fields (not including password or roles)."""
        return {"name"}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def search(self, pagination: Pagination, *, name: str | None = None) -> Page[User]:
        """Paginate users whose name contains ``name`` (case-insensitive).

        :param pagination: Page parameters.
        :param name: Optional substring filter.
        """
        stmt: Select[Any] = select(User)
        if name:
            stmt = stmt.where(User.name.ilike(f"%{escape_like(name)}%", escape="\\"))
        return self.paginate(pagination, stmt=stmt)


