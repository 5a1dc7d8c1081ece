"""Cross-origin policy for the ``/api`` routes."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# The bearer header and logout's refresh-token header must survive preflight.
REQUEST_HEADERS = ["Authorization", "Content-Type", "X-Refresh-Token", "X-Request-ID"]
RESPONSE_HEADERS = ["X-Request-ID", "WWW-Authenticate", "Content-Disposition"]


def parse_origins(raw: str | None) -> list[str] | str:
    """Turn ``CORS_ORIGINS`` into a list, or ``"*"`` when blank/wildcard."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return "*" if not origins or origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """
    Apply CORS to ``/api/*``.

    Credentials are only allowed for an explicit origin list; a wildcard
    policy never sends ``Access-Control-Allow-Credentials``.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials=origins != "*",
        allow_headers=REQUEST_HEADERS,
        expose_headers=RESPONSE_HEADERS,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
