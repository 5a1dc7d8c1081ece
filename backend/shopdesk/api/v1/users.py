"""Endpoints for the authenticated user's own account."""

from __future__ import annotations

from flask import Blueprint

from shopdesk.api.deps import json_response, require_auth, services, timing
from shopdesk.schemas import UserSchema
from shopdesk.services._shared.ports.token_codec import Principal

bp = Blueprint("user", __name__)

user_schema = UserSchema()


@bp.get("/profile")
@require_auth
@timing
def profile(principal: Principal):
    """Return the current user."""

    user = services().identity.get_profile(principal)
    return json_response({"data": user_schema.dump(user)})
