from marshmallow import fields, validate, validates, ValidationError

from . import RecordSchema, DATE_PATTERN, optional_email
from ..constants import SUPPLIER_CATEGORIES


class SupplierSchema(RecordSchema):
    """
    Schema for supplier records.
    Phone numbers are reduced to their digits before validation.
    """
    phone_fields = ('phone',)

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    category = fields.String(load_default='Outros', validate=validate.OneOf(SUPPLIER_CATEGORIES))
    contact_person = fields.String(load_default='', validate=validate.Length(max=100))
    phone = fields.String(load_default='')
    email = optional_email()
    rating = fields.Float(load_default=5, validate=validate.Range(min=0, max=5))
    last_order = fields.String(allow_none=True, load_default=None, validate=validate.Regexp(DATE_PATTERN))

    @validates('phone')
    def validate_phone(self, value, **kwargs):
        """Landlines, mobiles and numbers with country code: 10 to 13 digits"""
        if value and not 10 <= len(value) <= 13:
            raise ValidationError("Phone number must have between 10 and 13 digits")
