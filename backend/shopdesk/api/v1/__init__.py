"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .admin import bp as admin_bp  # noqa: E402
from .auth import bp as auth_bp  # noqa: E402
from .categories import bp as categories_bp  # noqa: E402
from .files import bp as files_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .shops import bp as shops_bp  # noqa: E402
from .users import bp as user_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (auth_bp, "/auth"),  # -> /api/v1/auth
    (user_bp, "/user"),
    (admin_bp, "/admin"),
    (shops_bp, "/shops"),
    (categories_bp, "/categories"),
    (files_bp, "/files"),
]
