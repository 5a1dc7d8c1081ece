"""
shopdesk.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for session-token and blob infrastructure.

These ports decouple the service layer from concrete implementations
of token signing, revocation storage and file storage.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec` together with the value types it trades in
    (:class:`~.Principal`, :class:`~.TokenClaims`, :class:`~.IssuedToken`,
    :class:`~.TokenClass`).

- :mod:`revocation_store`:
    Defines :class:`~.RevocationStore` and the :class:`~.InMemoryRevocationStore`
    double used by unit tests.

- :mod:`file_storage`:
    Defines :class:`~.FileStorage` and the :class:`~.SavedBlob` result.

Design Notes
------------
Concrete adapters (PyJWT, Redis, local disk) implement these interfaces under
``shopdesk.infra``.
"""

from __future__ import annotations

from .file_storage import FileStorage, SavedBlob
from .revocation_store import InMemoryRevocationStore, RevocationStore
from .token_codec import IssuedToken, Principal, TokenClaims, TokenClass, TokenCodec

__all__ = [
    "TokenCodec",
    "TokenClass",
    "TokenClaims",
    "IssuedToken",
    "Principal",
    "RevocationStore",
    "InMemoryRevocationStore",
    "FileStorage",
    "SavedBlob",
]
