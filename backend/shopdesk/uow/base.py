"""
Unit of Work contract used by the application services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shopdesk.repositories import (
        CategoryRepository,
        ShopRepository,
        StoredFileRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transactional boundary per use case.

    Every repository below shares the same session, so a shop, its attachment
    rows and its owner are committed (or discarded) together.
    """

    users: UserRepository
    shops: ShopRepository
    categories: CategoryRepository
    files: StoredFileRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
