"""Administrative user management."""

from __future__ import annotations

from flask import Blueprint, request

from shopdesk.api.deps import (
    json_response,
    parse_pagination,
    request_payload,
    require_roles,
    services,
    timing,
)
from shopdesk.models.user import ROLE_ADMIN
from shopdesk.schemas import UserFilterSchema, UserSchema, UserUpdateSchema, build_meta
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.identity.dto import UserSearchIn, UserUpdateIn

bp = Blueprint("admin", __name__)

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_update_schema = UserUpdateSchema()
user_filter_schema = UserFilterSchema()


@bp.get("/users")
@require_roles(ROLE_ADMIN)
@timing
def list_users(principal: Principal):
    """Return paginated users, optionally filtered by name."""

    filters = user_filter_schema.load(request.args)
    pagination = parse_pagination()
    page = services().identity.list_users(
        UserSearchIn(page=pagination.page, page_size=pagination.page_size, name=filters["name"])
    )
    return json_response({"data": user_list_schema.dump(page.items), "meta": build_meta(page.meta)})


@bp.put("/users/<int:user_id>")
@require_roles(ROLE_ADMIN)
@timing
def update_user(user_id: int, principal: Principal):
    data = user_update_schema.load(request_payload())
    user = services().identity.update_user(user_id, UserUpdateIn(name=data["name"]))
    return json_response({"data": user_schema.dump(user)})


@bp.delete("/users/<int:user_id>")
@require_roles(ROLE_ADMIN)
@timing
def delete_user(user_id: int, principal: Principal):
    """Delete an account with its shops; admins cannot delete themselves."""

    services().identity.delete_user(principal, user_id)
    return "", 204
