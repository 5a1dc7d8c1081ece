"""Shop, attachment and category schemas."""

from __future__ import annotations

from typing import Any

from flask import url_for
from marshmallow import EXCLUDE, Schema, fields, validate


class ShopCreateSchema(Schema):
    """Form fields of a shop creation (files travel as multipart parts)."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=3, max=30))
    budget = fields.Float(required=True, validate=validate.Range(min=0))


class ShopUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(load_default=None, validate=validate.Length(min=3, max=30))
    budget = fields.Float(load_default=None, validate=validate.Range(min=0))


class ShopFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(load_default=None, validate=validate.Length(min=1, max=30))
    created_by = fields.Integer(load_default=None)


class StoredFileSchema(Schema):
    """Attachment metadata plus its download URL."""

    id = fields.Integer(required=True)
    original_name = fields.String(required=True)
    extension = fields.String(required=True)
    content_type = fields.String(allow_none=True)
    size = fields.Integer(required=True)
    url = fields.Method("get_url")

    def get_url(self, obj: Any) -> str:
        return url_for("files.download", shop_id=obj.shop_id, file_id=obj.id)


class ShopSchema(Schema):
    """Public representation of a shop."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    budget = fields.Float(required=True)
    created_by = fields.Integer(required=True)
    files = fields.List(fields.Nested(StoredFileSchema))
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
