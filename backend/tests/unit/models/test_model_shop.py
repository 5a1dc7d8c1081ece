"""Tests for the Shop, Category and StoredFile models."""

from __future__ import annotations

import pytest
from shopdesk.models.shop import Category, Shop, StoredFile

from tests.factories.shop import ShopFactory


def _file(name: str = "abc.txt") -> StoredFile:
    return StoredFile(name=name, original_name="a.txt", base_path="/tmp", extension=".txt", size=1)


class TestShop:
    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            Shop(name="My shop", budget=-0.01, created_by=1)

    def test_budget_coerced_to_float(self):
        assert Shop(name="My shop", budget="12.5", created_by=1).budget == 12.5

    def test_name_validated(self):
        with pytest.raises(ValueError):
            Shop(name="no", budget=1, created_by=1)

    def test_deleting_shop_cascades_to_children(self, session, factories):
        shop = ShopFactory()
        shop.files = [_file()]
        shop.categories = [Category(name="Fruit")]
        session.commit()

        session.delete(shop)
        session.commit()

        assert session.query(StoredFile).count() == 0
        assert session.query(Category).count() == 0

    def test_replacing_files_deletes_orphans(self, session, factories):
        shop = ShopFactory()
        shop.files = [_file("one.txt")]
        session.commit()

        shop.files = [_file("two.txt")]
        session.commit()

        assert [f.name for f in session.query(StoredFile).all()] == ["two.txt"]


class TestCategory:
    def test_name_validated(self):
        with pytest.raises(ValueError):
            Category(name="x", shop_id=1)
