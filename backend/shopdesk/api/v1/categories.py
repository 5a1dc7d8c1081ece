"""Category endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from shopdesk.api.deps import (
    json_response,
    parse_pagination,
    request_payload,
    require_auth,
    services,
    timing,
)
from shopdesk.schemas import (
    CategoryCreateSchema,
    CategoryFilterSchema,
    CategorySchema,
    build_meta,
)
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.categories.dto import CategoryCreateIn, CategorySearchIn

bp = Blueprint("categories", __name__)

category_schema = CategorySchema()
category_list_schema = CategorySchema(many=True)
category_create_schema = CategoryCreateSchema()
category_filter_schema = CategoryFilterSchema()


@bp.get("")
@require_auth
@timing
def list_categories(principal: Principal):
    filters = category_filter_schema.load(request.args)
    pagination = parse_pagination()
    page = services().categories.list_categories(
        CategorySearchIn(
            page=pagination.page, page_size=pagination.page_size, shop_id=filters["shop_id"]
        )
    )
    return json_response(
        {"data": category_list_schema.dump(page.items), "meta": build_meta(page.meta)}
    )


@bp.post("")
@require_auth
@timing
def create_category(principal: Principal):
    """Create a category in a shop owned by the caller."""

    data = category_create_schema.load(request_payload())
    category = services().categories.create_category(principal, CategoryCreateIn(**data))
    return json_response({"data": category_schema.dump(category)}, status=201)


@bp.delete("/<int:category_id>")
@require_auth
@timing
def delete_category(category_id: int, principal: Principal):
    services().categories.delete_category(principal, category_id)
    return "", 204
