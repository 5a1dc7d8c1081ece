import io

import pytest
from shopdesk.services._shared.errors import NotFoundError
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.shops.dto import ShopCreateIn, UploadIn

from tests.factories.user import UserFactory


@pytest.fixture()
def shop(container, factories):
    owner = UserFactory()
    return container.shops.create_shop(
        Principal.of(owner.id, owner.roles),
        ShopCreateIn(
            name="Files shop",
            budget=1,
            files=[UploadIn(stream=io.BytesIO(b"%PDF"), filename="menu.pdf", content_type="application/pdf")],
        ),
    )


def test_open_file_resolves_blob(container, shop):
    out = container.files.open_file(shop.id, shop.files[0].id)

    assert out.path.read_bytes() == b"%PDF"
    assert out.download_name == "menu.pdf"
    assert out.content_type == "application/pdf"


def test_file_of_another_shop_is_not_found(container, shop):
    with pytest.raises(NotFoundError):
        container.files.open_file(shop.id + 1, shop.files[0].id)


def test_missing_blob_is_not_found(container, shop):
    out = container.files.open_file(shop.id, shop.files[0].id)
    out.path.unlink()

    with pytest.raises(NotFoundError):
        container.files.open_file(shop.id, shop.files[0].id)
