"""HTTP layer: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flask import Blueprint, Flask

log = logging.getLogger(__name__)


def join_prefix(*segments: str) -> str:
    """Join URL segments into one absolute prefix (``"/api", "v1", "/auth"`` -> ``/api/v1/auth``)."""

    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def mount(app: Flask, version: str, registry: Iterable[tuple[Blueprint, str]]) -> None:
    """Register every ``(blueprint, relative_prefix)`` of one API version."""

    base = app.config.get("API_BASE_PREFIX", "/api")
    for bp, rel_prefix in registry:
        prefix = join_prefix(base, version, rel_prefix)
        app.register_blueprint(bp, url_prefix=prefix)
        log.debug("api.mounted blueprint=%s prefix=%s", bp.name, prefix)


def init_app(app: Flask) -> None:
    from shopdesk.api.v1 import API_VERSION, REGISTRY

    mount(app, API_VERSION, REGISTRY)


__all__ = ["init_app", "join_prefix", "mount"]
