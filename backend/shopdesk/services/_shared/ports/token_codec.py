from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol


class TokenClass(str, Enum):
    """Token classes; each one is signed with its own key and lifetime."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated identity handed to protected handlers.

    :param id: User identifier, as carried in the ``sub`` claim.
    :type id: str
    :param roles: Role names snapshotted at token issuance.
    :type roles: frozenset[str]
    """

    id: str
    roles: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, user_id: int | str, roles: Iterable[str]) -> Principal:
        return cls(id=str(user_id), roles=frozenset(roles))

    def has_any_role(self, *roles: str) -> bool:
        return bool(self.roles.intersection(roles))


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified content of a token.

    :param jti: Unique token identifier.
    :param subject: Principal id.
    :param roles: Role snapshot (sorted tuple).
    :param token_class: Access or refresh.
    :param session_id: Identifier shared by the access/refresh pair of one login.
    :param issued_at: UTC issue time, whole seconds.
    :param expires_at: UTC expiry, ``issued_at + ttl(token_class)``.
    """

    jti: str
    subject: str
    roles: tuple[str, ...]
    token_class: TokenClass
    session_id: str
    issued_at: datetime
    expires_at: datetime

    @property
    def principal(self) -> Principal:
        return Principal.of(self.subject, self.roles)

    def remaining_seconds(self, now: datetime) -> float:
        return (self.expires_at - now).total_seconds()


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    A freshly minted token.

    :param value: Compact signed string sent to the client.
    :param claims: The claims embedded in ``value``.
    """

    value: str
    claims: TokenClaims


class TokenCodec(Protocol):
    """
    Abstraction for signing and verifying session tokens.

    Implementations are pure: no store or network access.
    """

    def issue(
        self, principal: Principal, token_class: TokenClass, *, session_id: str
    ) -> IssuedToken: ...

    def decode(self, raw: str | None, expected: TokenClass) -> TokenClaims: ...

    def now(self) -> datetime: ...
