"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)


def init_app(app: Flask, *, redis_override: redis.Redis | None = None) -> None:
    """Initialize SQLAlchemy, migrations and the revocation-store client.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`shopdesk.models` package to ensure SQLAlchemy metadata is ready
        for migrations.
    redis_override: redis.Redis | None
        Pre-built client (e.g. ``fakeredis``) used instead of connecting to
        ``REVOCATION_STORE_URL``.

    Raises
    ------
    RuntimeError
        If no client can be built or the configured server does not answer.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from shopdesk import models as _models  # noqa: F401

    migrate.init_app(app, db)

    if redis_override is not None:
        app.extensions["redis_client"] = redis_override
        return

    redis_url = app.config.get("REVOCATION_STORE_URL")
    if not redis_url:
        raise RuntimeError("REVOCATION_STORE_URL is required: token revocation cannot fail open.")

    timeout = float(app.config.get("REVOCATION_STORE_TIMEOUT", 3.0))
    client = redis.Redis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        health_check_interval=30,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = client


def get_redis(app: Flask) -> redis.Redis:
    """Return the Redis client bound to ``app``."""
    client = app.extensions.get("redis_client")
    if client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return client
