"""Shops, attachments and categories over HTTP."""

from __future__ import annotations

import io

import pytest

from tests.factories.shop import ShopFactory
from tests.factories.user import UserFactory
from tests.helpers.http import assert_problem, bearer, login

SHOPS = "/api/v1/shops"
CATEGORIES = "/api/v1/categories"


@pytest.fixture()
def owner(client, factories):
    user = UserFactory(email="owner@example.com")
    return user, bearer(login(client, "owner@example.com")["access_token"])


@pytest.fixture()
def stranger(client, factories):
    user = UserFactory(email="stranger@example.com")
    return user, bearer(login(client, "stranger@example.com")["access_token"])


def _create(client, headers, *, name="Corner shop", budget="12.50", files=()):
    data = {"name": name, "budget": budget}
    if files:
        data["files"] = [(io.BytesIO(content), filename) for filename, content in files]
    return client.post(SHOPS, data=data, headers=headers, content_type="multipart/form-data")


def test_create_shop_with_attachments(client, owner):
    user, headers = owner

    resp = _create(client, headers, files=[("menu.pdf", b"%PDF-1.7"), ("logo.png", b"\x89PNG")])

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["created_by"] == user.id
    assert data["budget"] == 12.5
    assert [f["original_name"] for f in data["files"]] == ["menu.pdf", "logo.png"]
    assert data["files"][0]["url"] == f"/api/v1/files/shops/{data['id']}/{data['files'][0]['id']}"


def test_download_attachment(client, owner, stranger):
    _, headers = owner
    shop = _create(client, headers, files=[("menu.pdf", b"%PDF-1.7")]).get_json()["data"]
    url = shop["files"][0]["url"]

    # Any authenticated user may read shops and their files.
    resp = client.get(url, headers=stranger[1])

    assert resp.status_code == 200
    assert resp.data == b"%PDF-1.7"
    assert "menu.pdf" in resp.headers["Content-Disposition"]
    resp.close()


def test_download_requires_authentication(client, owner):
    shop = _create(client, owner[1], files=[("menu.pdf", b"x")]).get_json()["data"]
    assert_problem(client.get(shop["files"][0]["url"]), 401, "missing_token")


def test_download_unknown_file(client, owner):
    assert_problem(client.get("/api/v1/files/shops/1/999", headers=owner[1]), 404, "not_found")


@pytest.mark.parametrize(
    "name, budget", [("ab", "1"), ("Valid shop", "-1"), ("Valid shop", "lots")]
)
def test_create_shop_validates_fields(client, owner, name, budget):
    assert_problem(_create(client, owner[1], name=name, budget=budget), 400, "validation_failed")


def test_create_shop_requires_authentication(client, factories):
    assert_problem(_create(client, {}), 401, "missing_token")


def test_list_and_get_shops(client, owner):
    user, headers = owner
    ShopFactory.create_batch(2, owner=user)
    other = ShopFactory()

    listing = client.get(f"{SHOPS}?created_by={user.id}", headers=headers).get_json()
    single = client.get(f"{SHOPS}/{other.id}", headers=headers)

    assert listing["meta"]["total"] == 2
    assert single.status_code == 200
    assert single.get_json()["data"]["created_by"] == other.created_by


def test_get_unknown_shop(client, owner):
    assert_problem(client.get(f"{SHOPS}/999", headers=owner[1]), 404, "not_found")


def test_owner_updates_and_replaces_files(client, owner):
    _, headers = owner
    shop = _create(client, headers, files=[("old.txt", b"old")]).get_json()["data"]

    resp = client.put(
        f"{SHOPS}/{shop['id']}",
        data={"budget": "99", "files": [(io.BytesIO(b"new"), "new.txt")]},
        headers=headers,
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["name"] == shop["name"]
    assert data["budget"] == 99
    assert [f["original_name"] for f in data["files"]] == ["new.txt"]
    assert_problem(client.get(shop["files"][0]["url"], headers=headers), 404, "not_found")


def test_stranger_cannot_update_or_delete(client, owner, stranger):
    shop = _create(client, owner[1]).get_json()["data"]

    assert_problem(
        client.put(f"{SHOPS}/{shop['id']}", json={"name": "Stolen"}, headers=stranger[1]), 403, "forbidden"
    )
    assert_problem(client.delete(f"{SHOPS}/{shop['id']}", headers=stranger[1]), 403, "forbidden")


def test_owner_deletes_shop(client, owner):
    _, headers = owner
    shop = _create(client, headers, files=[("a.txt", b"a")]).get_json()["data"]

    assert client.delete(f"{SHOPS}/{shop['id']}", headers=headers).status_code == 204
    assert_problem(client.get(f"{SHOPS}/{shop['id']}", headers=headers), 404, "not_found")
    assert_problem(client.get(shop["files"][0]["url"], headers=headers), 404, "not_found")


# ------------------------------ Categories --------------------------------- #
def test_category_lifecycle(client, owner, stranger):
    _, headers = owner
    shop = _create(client, headers).get_json()["data"]

    created = client.post(CATEGORIES, json={"name": "Drinks", "shop_id": shop["id"]}, headers=headers)
    assert created.status_code == 201
    category = created.get_json()["data"]

    listing = client.get(f"{CATEGORIES}?shop_id={shop['id']}", headers=stranger[1]).get_json()
    assert [c["name"] for c in listing["data"]] == ["Drinks"]

    assert_problem(client.delete(f"{CATEGORIES}/{category['id']}", headers=stranger[1]), 403, "forbidden")
    assert client.delete(f"{CATEGORIES}/{category['id']}", headers=headers).status_code == 204


def test_category_in_foreign_shop_is_forbidden(client, owner, stranger):
    shop = _create(client, owner[1]).get_json()["data"]
    resp = client.post(CATEGORIES, json={"name": "Drinks", "shop_id": shop["id"]}, headers=stranger[1])
    assert_problem(resp, 403, "forbidden")


def test_category_for_unknown_shop(client, owner):
    resp = client.post(CATEGORIES, json={"name": "Drinks", "shop_id": 999}, headers=owner[1])
    assert_problem(resp, 404, "not_found")
