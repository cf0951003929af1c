from marshmallow import Schema, fields, validate, EXCLUDE


class SuggestReplySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    message = fields.String(required=True, validate=validate.Length(min=1))


class ComposeMessageSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    phone = fields.String(required=True, validate=validate.Length(min=8))
    text = fields.String(required=True, validate=validate.Length(min=1))
