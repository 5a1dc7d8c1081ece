"""Authentication endpoints: register, login, refresh and logout."""

from __future__ import annotations

from flask import Blueprint, request

from shopdesk.api.deps import (
    REFRESH_TOKEN_HEADER,
    json_response,
    request_payload,
    services,
    timing,
)
from shopdesk.schemas import (
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    RegistrationSchema,
    TokenPairSchema,
)
from shopdesk.services.auth.authenticator import extract_bearer
from shopdesk.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
token_schema = TokenPairSchema()
registration_schema = RegistrationSchema()


@bp.post("/register")
@timing
def register():
    """Create an account and return it with a fresh token pair."""

    data = register_schema.load(request_payload())
    result = services().sessions.register(RegisterIn(**data))
    return json_response({"data": registration_schema.dump(result)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request_payload())
    pair = services().sessions.login(LoginIn(**data))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token; the presented one cannot be used again."""

    data = refresh_schema.load(request_payload())
    pair = services().sessions.refresh(RefreshIn(refresh_token=data["refresh_token"]))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Revoke the access token, the refresh token and their session."""

    data = logout_schema.load(request_payload())
    refresh_token = request.headers.get(REFRESH_TOKEN_HEADER) or data.get("refresh_token")
    services().sessions.logout(
        LogoutIn(
            access_token=extract_bearer(request.headers.get("Authorization")),
            refresh_token=refresh_token,
        )
    )
    return "", 204
