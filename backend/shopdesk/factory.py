"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask

from shopdesk.core.config import BaseConfig, get_config
from shopdesk.core.logger import configure_logging, init_app as init_logging
from shopdesk.services._shared.ports.token_codec import TokenCodec


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    redis_client: redis.Redis | None = None,
    token_codec: TokenCodec | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Parameters
    ----------
    config:
        Config class/object (or import string); defaults to ``APP_ENV``'s.
    redis_client:
        Pre-built revocation-store client, e.g. ``fakeredis`` in tests.
    token_codec:
        Codec override, e.g. one with a controlled clock.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from shopdesk.core import extensions

    extensions.init_app(app, redis_override=redis_client)

    init_logging(app)

    from shopdesk.core import container

    container.init_app(app, codec=token_codec)

    from shopdesk.core import cors

    cors.init_app(app)

    from shopdesk.api import init_app as init_api

    init_api(app)

    from shopdesk.core import errors

    errors.init_app(app)

    from shopdesk import cli as app_cli

    app_cli.init_app(app)

    return app
