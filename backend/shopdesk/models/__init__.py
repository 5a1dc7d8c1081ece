from shopdesk.models.shop import Category, Shop, StoredFile
from shopdesk.models.user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Category",
    "Shop",
    "StoredFile",
    "User",
    "ROLE_ADMIN",
    "ROLE_USER",
]
