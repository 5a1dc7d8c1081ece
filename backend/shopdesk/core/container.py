"""Build the application's collaborators once per app and expose them to views."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from flask import Flask, current_app

from shopdesk.core.extensions import get_redis
from shopdesk.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from shopdesk.infra.redis.redis_revocation_store import RedisRevocationStore
from shopdesk.infra.storage.local_file_storage import LocalFileStorage
from shopdesk.services._shared.ports.file_storage import FileStorage
from shopdesk.services._shared.ports.revocation_store import RevocationStore
from shopdesk.services._shared.ports.token_codec import TokenCodec
from shopdesk.services.auth.authenticator import RequestAuthenticator
from shopdesk.services.auth.credentials import CredentialVerifier
from shopdesk.services.auth.dto import AuthTokenConfig
from shopdesk.services.auth.service import SessionManager
from shopdesk.services.categories.service import CategoryService
from shopdesk.services.files.service import FileService
from shopdesk.services.identity.service import IdentityService
from shopdesk.services.shops.service import ShopService

EXTENSION_KEY = "shopdesk.container"


@dataclass(frozen=True, slots=True)
class ServiceContainer:
    """
    Wired collaborators shared by every request of one app.

    None of them hold per-request state; the database session is resolved by
    each Unit of Work at call time.
    """

    token_cfg: AuthTokenConfig
    codec: TokenCodec
    store: RevocationStore
    storage: FileStorage
    verifier: CredentialVerifier
    authenticator: RequestAuthenticator
    sessions: SessionManager
    identity: IdentityService
    shops: ShopService
    categories: CategoryService
    files: FileService


def build_container(app: Flask, *, codec: TokenCodec | None = None) -> ServiceContainer:
    """
    Build the container from ``app.config``.

    :param app: Application with extensions already initialized.
    :param codec: Optional pre-built codec (tests inject one with a fixed clock).
    :raises ValueError: If the token configuration is inconsistent.
    """
    token_cfg = AuthTokenConfig.from_mapping(app.config)
    codec = codec or PyJWTTokenCodec(token_cfg)
    store = RedisRevocationStore(
        get_redis(app), prefix=app.config.get("REVOCATION_KEY_PREFIX", "shopdesk:revoked:")
    )
    storage = LocalFileStorage(Path(app.config.get("UPLOAD_DIR", "./uploads")).resolve())
    verifier = CredentialVerifier(app.config.get("PASSWORD_HASH_METHOD") or "scrypt:32768:8:1")

    return ServiceContainer(
        token_cfg=token_cfg,
        codec=codec,
        store=store,
        storage=storage,
        verifier=verifier,
        authenticator=RequestAuthenticator(codec=codec, store=store),
        sessions=SessionManager(
            codec=codec,
            store=store,
            verifier=verifier,
            token_cfg=token_cfg,
            conceal_unknown_email=bool(app.config.get("AUTH_CONCEAL_UNKNOWN_EMAIL")),
        ),
        identity=IdentityService(storage=storage, verifier=verifier),
        shops=ShopService(storage=storage),
        categories=CategoryService(),
        files=FileService(storage=storage),
    )


def init_app(app: Flask, *, codec: TokenCodec | None = None) -> None:
    app.extensions[EXTENSION_KEY] = build_container(app, codec=codec)


def get_container(app: Flask | None = None) -> ServiceContainer:
    """Return the container bound to ``app`` (defaults to ``current_app``)."""
    target = app if app is not None else current_app
    container = target.extensions.get(EXTENSION_KEY)
    if container is None:
        raise RuntimeError("Service container is not initialized. Call init_app() first.")
    return container
