# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass

from shopdesk.repositories.base import Page


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param total: Total rows available.
    :type total: int
    :param page: Current page (1-based).
    :type page: int
    :param page_size: Page size.
    :type page_size: int
    :param total_pages: Number of pages for ``total`` rows.
    :type total_pages: int
    """

    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> PageMeta:
        return cls(
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
        )
