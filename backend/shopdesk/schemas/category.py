"""Category schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class CategoryCreateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=3, max=30))
    shop_id = fields.Integer(required=True)


class CategoryFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    shop_id = fields.Integer(load_default=None)


class CategorySchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)
    shop_id = fields.Integer(required=True)
    created_at = fields.DateTime(allow_none=True)
