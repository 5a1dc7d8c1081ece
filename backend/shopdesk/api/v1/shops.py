"""Shop endpoints (multipart for attachments)."""

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
    ShopCreateSchema,
    ShopFilterSchema,
    ShopSchema,
    ShopUpdateSchema,
    build_meta,
)
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.shops.dto import ShopCreateIn, ShopSearchIn, ShopUpdateIn, UploadIn

bp = Blueprint("shops", __name__)

shop_schema = ShopSchema()
shop_list_schema = ShopSchema(many=True)
shop_create_schema = ShopCreateSchema()
shop_update_schema = ShopUpdateSchema()
shop_filter_schema = ShopFilterSchema()

FILES_FIELD = "files"


def _uploads() -> list[UploadIn]:
    """Collect the non-empty ``files`` parts of a multipart request."""

    return [
        UploadIn(stream=f.stream, filename=f.filename or "", content_type=f.mimetype or None)
        for f in request.files.getlist(FILES_FIELD)
        if f and f.filename
    ]


@bp.get("")
@require_auth
@timing
def list_shops(principal: Principal):
    filters = shop_filter_schema.load(request.args)
    pagination = parse_pagination()
    page = services().shops.list_shops(
        ShopSearchIn(
            page=pagination.page,
            page_size=pagination.page_size,
            name=filters["name"],
            created_by=filters["created_by"],
        )
    )
    return json_response({"data": shop_list_schema.dump(page.items), "meta": build_meta(page.meta)})


@bp.post("")
@require_auth
@timing
def create_shop(principal: Principal):
    """Create a shop owned by the caller."""

    data = shop_create_schema.load(request_payload())
    shop = services().shops.create_shop(
        principal, ShopCreateIn(name=data["name"], budget=data["budget"], files=_uploads())
    )
    return json_response({"data": shop_schema.dump(shop)}, status=201)


@bp.get("/<int:shop_id>")
@require_auth
@timing
def get_shop(shop_id: int, principal: Principal):
    shop = services().shops.get_shop(shop_id)
    return json_response({"data": shop_schema.dump(shop)})


@bp.put("/<int:shop_id>")
@require_auth
@timing
def update_shop(shop_id: int, principal: Principal):
    """Update a shop; uploaded files replace the previous attachments."""

    data = shop_update_schema.load(request_payload())
    shop = services().shops.update_shop(
        principal,
        shop_id,
        ShopUpdateIn(name=data["name"], budget=data["budget"], files=_uploads()),
    )
    return json_response({"data": shop_schema.dump(shop)})


@bp.delete("/<int:shop_id>")
@require_auth
@timing
def delete_shop(shop_id: int, principal: Principal):
    services().shops.delete_shop(principal, shop_id)
    return "", 204
