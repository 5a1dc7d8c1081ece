import io

import pytest
from shopdesk.models.shop import Shop, StoredFile
from shopdesk.models.user import ROLE_ADMIN, ROLE_USER, User
from shopdesk.services._shared.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationFailedError,
)
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.identity.dto import AdminCreateIn, UserSearchIn, UserUpdateIn
from shopdesk.services.identity.service import IdentityService
from shopdesk.services.shops.dto import ShopCreateIn, UploadIn

from tests.factories.user import UserFactory


def _actor(user: User) -> Principal:
    return Principal.of(user.id, user.roles)


class TestIdentityService:
    """Validate IdentityService behaviours for the User aggregate."""

    @pytest.fixture()
    def service(self, container) -> IdentityService:
        """Return the service wired by the app (storage under ``tmp_path``)."""
        return container.identity

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def test_get_profile_returns_public_view(self, service, factories):
        user = UserFactory(name="Alice", email="alice@example.com")

        out = service.get_profile(_actor(user))

        assert out.id == user.id
        assert out.email == "alice@example.com"
        assert out.roles == (ROLE_USER,)
        assert not hasattr(out, "password_hash")

    def test_get_profile_for_deleted_account(self, service, factories):
        with pytest.raises(NotFoundError):
            service.get_profile(Principal.of(999, [ROLE_USER]))

    def test_list_users_paginates_with_meta(self, service, factories):
        UserFactory.create_batch(5)

        page = service.list_users(UserSearchIn(page=2, page_size=2))

        assert len(page.items) == 2
        assert page.meta.total == 5
        assert page.meta.page == 2
        assert page.meta.total_pages == 3

    def test_list_users_filters_by_name(self, service, factories):
        UserFactory(name="Maria Lopez")
        UserFactory(name="John Smith")

        page = service.list_users(UserSearchIn(name="lop"))

        assert [u.name for u in page.items] == ["Maria Lopez"]

    def test_list_users_clamps_page_size(self, service, factories):
        UserFactory()
        page = service.list_users(UserSearchIn(page=0, page_size=1000))
        assert page.meta.page == 1
        assert page.meta.page_size == service.MAX_PAGE_SIZE

    # --------------------------------------------------------------------- #
    # Administration
    # --------------------------------------------------------------------- #

    def test_update_user_renames(self, service, factories):
        user = UserFactory(name="Before")

        out = service.update_user(user.id, UserUpdateIn(name="  After  "))

        assert out.name == "After"

    def test_update_user_rejects_invalid_name(self, service, factories):
        user = UserFactory()
        with pytest.raises(ValidationFailedError):
            service.update_user(user.id, UserUpdateIn(name="x"))

    def test_update_unknown_user(self, service, factories):
        with pytest.raises(NotFoundError):
            service.update_user(404, UserUpdateIn(name="Nobody"))

    def test_delete_user_removes_shops_and_blobs(self, service, container, session, factories):
        admin = UserFactory(admin=True)
        victim = UserFactory()
        shop = container.shops.create_shop(
            _actor(victim),
            ShopCreateIn(
                name="Victim shop",
                budget=10,
                files=[UploadIn(stream=io.BytesIO(b"data"), filename="a.txt")],
            ),
        )
        blob_path = container.storage.path_for(
            str(container.storage.root), session.query(StoredFile).one().name
        )
        assert blob_path.is_file()

        service.delete_user(_actor(admin), victim.id)

        assert session.get(User, victim.id) is None
        assert session.get(Shop, shop.id) is None
        assert session.query(StoredFile).count() == 0
        assert not blob_path.exists()

    def test_admin_cannot_delete_self(self, service, session, factories):
        admin = UserFactory(admin=True)

        with pytest.raises(AuthorizationError):
            service.delete_user(_actor(admin), admin.id)
        assert session.get(User, admin.id) is not None

    def test_delete_unknown_user(self, service, factories):
        admin = UserFactory(admin=True)
        with pytest.raises(NotFoundError):
            service.delete_user(_actor(admin), 404)

    # --------------------------------------------------------------------- #
    # Admin bootstrap
    # --------------------------------------------------------------------- #

    def test_create_admin_creates_account(self, service, container, session, factories):
        out, created = service.create_admin(
            AdminCreateIn(name="Root", email="Root@Example.com", password="secret1")
        )

        assert created is True
        assert out.email == "root@example.com"
        assert set(out.roles) == {ROLE_USER, ROLE_ADMIN}
        stored = session.get(User, out.id)
        assert stored.password_hash.startswith(container.verifier.method.split(":")[0])

    def test_create_admin_promotes_existing_account(self, service, session, factories):
        user = UserFactory(email="bob@example.com")
        old_hash = user.password_hash

        out, created = service.create_admin(
            AdminCreateIn(name="Ignored", email="bob@example.com", password="ignored1")
        )

        assert created is False
        assert out.id == user.id
        assert ROLE_ADMIN in out.roles
        session.expire_all()
        assert session.get(User, user.id).password_hash == old_hash

    def test_create_admin_rejects_invalid_email(self, service, factories):
        with pytest.raises(ValidationFailedError):
            service.create_admin(AdminCreateIn(name="Root", email="nope", password="secret1"))
