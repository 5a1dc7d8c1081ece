"""Factory Boy definitions for shops and categories."""

from __future__ import annotations

import factory
from shopdesk.models.shop import Category, Shop

from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class ShopFactory(BaseFactory):
    """Build persisted shops; ``owner`` defaults to a fresh user."""

    class Meta:
        model = Shop
        exclude = ("owner",)

    id = None
    owner = factory.SubFactory(UserFactory)
    name = factory.Sequence(lambda n: f"shop{n:03d}")
    budget = factory.Faker("pyfloat", min_value=0, max_value=10_000, right_digits=2)
    created_by = factory.LazyAttribute(lambda o: o.owner.id)


class CategoryFactory(BaseFactory):
    class Meta:
        model = Category

    id = None
    name = factory.Sequence(lambda n: f"category{n:03d}")
    shop = factory.SubFactory(ShopFactory)
