"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from shopdesk.services._shared.dto import PageMeta


class PaginationQuerySchema(Schema):
    """Validate ``page``/``page_size`` with configurable defaults.

    Unknown query parameters (resource filters) are ignored here; each
    resource parses its own filters.
    """

    class Meta:
        unknown = EXCLUDE

    def __init__(
        self, *, default_page_size: int = 10, max_page_size: int = 100, **kwargs: Any
    ) -> None:
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    page_size = fields.Integer(validate=validate.Range(min=1))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        size = data.get("page_size", self._default_page_size)
        data["page_size"] = min(max(size, 1), self._max_page_size)
        data.setdefault("page", 1)
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    page_size = fields.Integer(required=True)
    total_pages = fields.Integer(required=True)


def build_meta(meta: PageMeta) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return MetaSchema().dump(meta)
