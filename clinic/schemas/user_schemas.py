from marshmallow import Schema, fields, validate, EXCLUDE

from . import RecordSchema, EMAIL_PATTERN
from ..constants import USER_ROLES

HEX_COLOR = r'^#[0-9a-fA-F]{6}$'


class UserSchema(RecordSchema):
    """Staff profile as managed from the settings view"""
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.String(required=True, validate=[validate.Length(min=3), validate.Regexp(EMAIL_PATTERN)])
    role = fields.String(load_default='ATTENDANT', validate=validate.OneOf(USER_ROLES))
    avatar = fields.String(allow_none=True, load_default=None)
    active = fields.Boolean(load_default=True)
    specialty = fields.String(allow_none=True, load_default=None)


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True, validate=validate.Length(min=3))
    password = fields.String(required=True, validate=validate.Length(min=1), load_only=True)


class AppearanceSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    primary_color = fields.String(required=True, validate=validate.Regexp(HEX_COLOR))
    secondary_color = fields.String(required=True, validate=validate.Regexp(HEX_COLOR))
