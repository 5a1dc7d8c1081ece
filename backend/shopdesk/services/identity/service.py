"""
IdentityService
===============

Aggregate service for the ``User`` aggregate outside of the session flow:

- Profile lookup for the authenticated principal.
- Administrative listing, renaming and deletion of accounts.
- Bootstrapping administrators (used by ``flask users create-admin``).

Notes
-----
- Sign-in, registration and tokens live in :mod:`shopdesk.services.auth`.
- Deleting a user removes the shops they own together with their blobs.
"""

from __future__ import annotations

import logging

from shopdesk.models.user import ROLE_ADMIN, ROLE_USER
from shopdesk.repositories.user import UserRepository
from shopdesk.services._shared.base import BaseService
from shopdesk.services._shared.dto import PageMeta
from shopdesk.services._shared.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationFailedError,
)
from shopdesk.services._shared.policies.common import is_self
from shopdesk.services._shared.ports.file_storage import FileStorage
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.auth.credentials import CredentialVerifier
from shopdesk.services.identity.dto import (
    AdminCreateIn,
    UserPageOut,
    UserPublicOut,
    UserSearchIn,
    UserUpdateIn,
)

log = logging.getLogger(__name__)


class IdentityService(BaseService):
    """
    Application service for the ``User`` aggregate.

    :param storage: Blob storage used to clean up attachments of deleted users.
    :param verifier: Password hasher for accounts created outside registration.
    """

    def __init__(self, *, storage: FileStorage, verifier: CredentialVerifier) -> None:
        self.storage = storage
        self.verifier = verifier

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_profile(self, principal: Principal) -> UserPublicOut:
        """
        Return the account behind the authenticated principal.

        :param principal: Identity injected by the authenticator.
        :type principal: Principal
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises NotFoundError: If the account was deleted after the token was issued.
        """
        return self.get_user(int(principal.id))

    def get_user(self, user_id: int) -> UserPublicOut:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut.from_model(user)

    def list_users(self, dto: UserSearchIn) -> UserPageOut:
        """
        Paginated user listing with an optional name filter.

        :param dto: Page and filter parameters.
        :type dto: UserSearchIn
        :returns: Page of users with metadata.
        :rtype: UserPageOut
        """
        pagination = self.ensure_pagination(page=dto.page, page_size=dto.page_size)
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            page = repo.search(pagination, name=dto.name)
            return UserPageOut(
                items=[UserPublicOut.from_model(u) for u in page.items],
                meta=PageMeta.from_page(page),
            )

    # --------------------------------------------------------------------- #
    # Administration
    # --------------------------------------------------------------------- #

    def update_user(self, user_id: int, dto: UserUpdateIn) -> UserPublicOut:
        """
        Rename an account.

        :param user_id: Target user id.
        :param dto: New values.
        :returns: Updated user DTO.
        :raises NotFoundError: When user not found.
        :raises ValidationFailedError: When the model rejects the name.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            try:
                repo.update(user, name=dto.name)
            except ValueError as exc:
                raise ValidationFailedError(str(exc), {"name": [str(exc)]}) from exc
            return UserPublicOut.from_model(user)

    def delete_user(self, actor: Principal, user_id: int) -> None:
        """
        Delete an account, its shops and their attachments.

        :param actor: Administrator performing the deletion.
        :param user_id: Target user id.
        :raises AuthorizationError: When the actor targets their own account.
        :raises NotFoundError: When user not found.
        """
        if is_self(actor_id=actor.id, target_id=user_id):
            raise AuthorizationError("You cannot delete your own account.")

        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            blobs = []
            for shop in uow.shops.list_owned_by(user.id):
                blobs.extend((f.base_path, f.name) for f in shop.files)
                uow.shops.delete(shop)
            uow.users.delete(user)

        # Bytes go only once the rows are committed.
        for base_path, name in blobs:
            self.storage.delete(base_path, name)
        log.info("identity.user_deleted user_id=%s by=%s files=%s", user_id, actor.id, len(blobs))

    def create_admin(self, dto: AdminCreateIn) -> tuple[UserPublicOut, bool]:
        """
        Create an administrator, or promote the existing account with that email.

        Registration never grants ``admin``; this is the only way in.

        :param dto: Admin account fields.
        :returns: The account and whether it was created (``False`` = promoted).
        :raises ValidationFailedError: When the model rejects a field.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email)
            created = user is None
            try:
                if user is None:
                    user = repo.add(
                        repo.model(
                            name=dto.name,
                            email=dto.email,
                            password_hash=self.verifier.hash_password(dto.password),
                            roles=[ROLE_USER, ROLE_ADMIN],
                        )
                    )
                else:
                    user.roles = sorted({*(user.roles or []), ROLE_ADMIN})
                    repo.flush()
            except ValueError as exc:
                raise ValidationFailedError(str(exc)) from exc
            out = UserPublicOut.from_model(user)

        log.info("identity.admin_%s user_id=%s", "created" if created else "promoted", out.id)
        return out, created
