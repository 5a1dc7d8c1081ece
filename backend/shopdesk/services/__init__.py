"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`shopdesk.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``shopdesk.services._shared``)
    * :class:`BaseService`
    * :class:`PageMeta`

- Session lifecycle (from ``shopdesk.services.auth``)
    * :class:`SessionManager`, :class:`RequestAuthenticator`, :class:`CredentialVerifier`

- Aggregate services
    * :class:`IdentityService`, :class:`ShopService`, :class:`CategoryService`,
      :class:`FileService`
"""

from __future__ import annotations

from ._shared.base import BaseService
from ._shared.dto import PageMeta
from .auth.authenticator import Authentication, RequestAuthenticator
from .auth.credentials import CredentialVerifier
from .auth.service import SessionManager
from .categories.service import CategoryService
from .files.service import FileService
from .identity.service import IdentityService
from .shops.service import ShopService

__all__ = [
    # Base
    "BaseService",
    "PageMeta",
    # Sessions
    "Authentication",
    "CredentialVerifier",
    "RequestAuthenticator",
    "SessionManager",
    # Aggregates
    "IdentityService",
    "ShopService",
    "CategoryService",
    "FileService",
]
