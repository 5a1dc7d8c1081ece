# shopdesk/services/auth/service.py
from __future__ import annotations

import logging
import math
import uuid

from sqlalchemy.exc import IntegrityError

from shopdesk.models.user import ROLE_USER
from shopdesk.repositories.user import UserRepository
from shopdesk.services._shared.base import BaseService
from shopdesk.services._shared.errors import (
    BadCredentialError,
    DuplicateEmailError,
    MissingInputError,
    TokenRevokedError,
    UnknownEmailError,
    ValidationFailedError,
    violates,
)
from shopdesk.services._shared.ports.revocation_store import RevocationStore
from shopdesk.services._shared.ports.token_codec import (
    Principal,
    TokenClaims,
    TokenClass,
    TokenCodec,
)
from shopdesk.services.auth.credentials import CredentialVerifier
from shopdesk.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    RegistrationOut,
    TokenPairOut,
)
from shopdesk.services.auth.keys import jti_key, sid_key
from shopdesk.services.identity.dto import UserPublicOut

log = logging.getLogger(__name__)

REASON_ROTATED = "rotated"
REASON_LOGOUT = "logout"


class SessionManager(BaseService):
    """
    Session token lifecycle (login / register / refresh / logout).

    Every pair shares a session id (``sid``). Revocation is recorded per token
    ``jti`` and per ``sid``, so revoking a session also kills its access token
    before it expires. Refresh tokens are single-use: the first caller to claim
    the old ``jti`` in the revocation store wins, every other caller gets
    :class:`TokenRevokedError`.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        store: RevocationStore,
        verifier: CredentialVerifier,
        token_cfg: AuthTokenConfig,
        conceal_unknown_email: bool = False,
    ) -> None:
        """
        Initialize the manager with its collaborators.

        :param codec: Token signer/verifier.
        :param store: Shared revocation set.
        :param verifier: Password hashing and checking.
        :param token_cfg: Immutable TTL/secret configuration.
        :param conceal_unknown_email: Answer unknown emails with ``BadCredentialError``.
        """
        self.codec = codec
        self.store = store
        self.verifier = verifier
        self.cfg = token_cfg
        self.conceal_unknown_email = conceal_unknown_email

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Access/Refresh token pair.
        :raises UnknownEmailError: No account for the email (unless concealed).
        :raises BadCredentialError: Wrong password.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email)
            if user is None:
                log.warning("auth.login.failed reason=unknown_email")
                if self.conceal_unknown_email:
                    raise BadCredentialError()
                raise UnknownEmailError()
            try:
                principal = self.verifier.verify(user, dto.password)
            except BadCredentialError:
                log.warning("auth.login.failed reason=bad_password user_id=%s", user.id)
                raise

        pair = self._issue_pair(principal)
        log.info("auth.login user_id=%s sid=%s", principal.id, pair.session_id)
        return pair

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> RegistrationOut:
        """
        Create an account with the default role and sign it in.

        :param dto: Registration input.
        :returns: Created user plus a token pair.
        :raises ValidationFailedError: Passwords differ.
        :raises DuplicateEmailError: Email already registered.
        """
        if dto.password != dto.confirm_password:
            raise ValidationFailedError(
                "Validation failed",
                {"confirm_password": ["Passwords do not match."]},
            )

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if repo.exists_by_email(dto.email):
                raise DuplicateEmailError()
            try:
                user = repo.add(
                    repo.model(
                        name=dto.name,
                        email=dto.email,
                        password_hash=self.verifier.hash_password(dto.password),
                        roles=[ROLE_USER],
                    )
                )
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise DuplicateEmailError() from exc
                raise
            except ValueError as exc:
                raise ValidationFailedError(str(exc)) from exc
            public = UserPublicOut.from_model(user)

        pair = self._issue_pair(Principal.of(public.id, public.roles))
        log.info("auth.register user_id=%s sid=%s", public.id, pair.session_id)
        return RegistrationOut(user=public, tokens=pair)

    # ------------------------------------------------------------------ #
    # Refresh with single-use rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - Decoding errors (signature, expiry, class, format) propagate as-is.
        - A revoked session or an already-consumed token raises ``TokenRevokedError``.
        - The old ``jti`` and the old session are revoked before the new pair
          is returned, so the previous access token stops working too.
        """
        claims = self.codec.decode(dto.refresh_token, TokenClass.REFRESH)

        if self.store.is_revoked(jti_key(claims.jti), sid_key(claims.session_id)):
            log.warning(
                "auth.refresh.reused user_id=%s sid=%s", claims.subject, claims.session_id
            )
            raise TokenRevokedError("Refresh token was already used")

        # Read the account before consuming the token so a database failure
        # leaves the refresh token usable for a retry.
        principal = self._load_principal(claims.subject)

        ttl = self._remaining_ttl(claims)
        if not self.store.mark_revoked(jti_key(claims.jti), ttl, reason=REASON_ROTATED):
            # Lost the race against a concurrent refresh of the same token.
            log.warning(
                "auth.refresh.reused user_id=%s sid=%s", claims.subject, claims.session_id
            )
            raise TokenRevokedError("Refresh token was already used")
        self.store.mark_revoked(sid_key(claims.session_id), ttl, reason=REASON_ROTATED)

        pair = self._issue_pair(principal)
        log.info(
            "auth.refresh user_id=%s old_sid=%s sid=%s",
            principal.id,
            claims.session_id,
            pair.session_id,
        )
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Revoke both tokens and their session(s).

        :param dto: Access and refresh tokens of the session.
        :raises MissingInputError: Either token is absent.
        """
        if not dto.access_token or not dto.refresh_token:
            raise MissingInputError("Both access and refresh tokens are required")

        access = self.codec.decode(dto.access_token, TokenClass.ACCESS)
        refresh = self.codec.decode(dto.refresh_token, TokenClass.REFRESH)

        session_ttls: dict[str, int] = {}
        for claims in (access, refresh):
            ttl = self._remaining_ttl(claims)
            self.store.mark_revoked(jti_key(claims.jti), ttl, reason=REASON_LOGOUT)
            session_ttls[claims.session_id] = max(ttl, session_ttls.get(claims.session_id, 0))
        for sid, ttl in session_ttls.items():
            self.store.mark_revoked(sid_key(sid), ttl, reason=REASON_LOGOUT)

        log.info("auth.logout user_id=%s sid=%s", refresh.subject, refresh.session_id)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, principal: Principal) -> TokenPairOut:
        session_id = uuid.uuid4().hex
        access = self.codec.issue(principal, TokenClass.ACCESS, session_id=session_id)
        refresh = self.codec.issue(principal, TokenClass.REFRESH, session_id=session_id)
        return TokenPairOut(
            access_token=access.value,
            refresh_token=refresh.value,
            expires_in=int(self.cfg.access_expires.total_seconds()),
            refresh_expires_in=int(self.cfg.refresh_expires.total_seconds()),
            session_id=session_id,
        )

    def _load_principal(self, subject: str) -> Principal:
        """Re-read the account so refreshed tokens carry current roles."""
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(int(subject)) if subject.isdigit() else None
            if user is None:
                raise BadCredentialError("Account no longer exists")
            return Principal.of(user.id, user.roles or [])

    def _remaining_ttl(self, claims: TokenClaims) -> int:
        return max(1, math.ceil(claims.remaining_seconds(self.codec.now())))
