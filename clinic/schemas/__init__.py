from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

from ..utils.helpers import digits_only

DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}$'
OPTIONAL_DATE_PATTERN = r'^(\d{4}-\d{2}-\d{2})?$'
TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'
EMAIL_PATTERN = r'^([^@\s]+@[^@\s]+\.[^@\s]+)?$'


class RecordSchema(Schema):
    """
    Base schema for every persisted record.

    Loading fills each absent field with its default, so a loaded record is
    always complete and an edit replaces the whole stored row.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.String(allow_none=True, load_default=None)

    phone_fields = ()

    @pre_load
    def clean_phone_numbers(self, data, **kwargs):
        """Keep only the digits of phone fields"""
        if not self.phone_fields or not isinstance(data, dict):
            return data
        data = dict(data)
        for name in self.phone_fields:
            if isinstance(data.get(name), str):
                data[name] = digits_only(data[name])
        return data


def optional_email():
    return fields.String(load_default='', validate=validate.Regexp(EMAIL_PATTERN, error="Invalid email address"))
