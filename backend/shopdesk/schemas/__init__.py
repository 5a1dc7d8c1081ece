"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    RegistrationSchema,
    TokenPairSchema,
)
from .category import CategoryCreateSchema, CategoryFilterSchema, CategorySchema
from .common import MetaSchema, PaginationQuerySchema, build_meta
from .shop import (
    ShopCreateSchema,
    ShopFilterSchema,
    ShopSchema,
    ShopUpdateSchema,
    StoredFileSchema,
)
from .user import UserFilterSchema, UserSchema, UserUpdateSchema

__all__ = [
    "LoginSchema",
    "LogoutSchema",
    "RefreshSchema",
    "RegisterSchema",
    "RegistrationSchema",
    "TokenPairSchema",
    "PaginationQuerySchema",
    "MetaSchema",
    "build_meta",
    "UserSchema",
    "UserUpdateSchema",
    "UserFilterSchema",
    "ShopSchema",
    "ShopCreateSchema",
    "ShopUpdateSchema",
    "ShopFilterSchema",
    "StoredFileSchema",
    "CategorySchema",
    "CategoryCreateSchema",
    "CategoryFilterSchema",
]
