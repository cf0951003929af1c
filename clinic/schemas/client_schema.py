from marshmallow import Schema, fields, validate, EXCLUDE

from . import RecordSchema, DATE_PATTERN, OPTIONAL_DATE_PATTERN, optional_email
from ..constants import CLIENT_STATUSES, LEAD_SOURCES
from ..utils.helpers import today_iso


class ClinicalRecordSchema(Schema):
    """One entry of a client's clinical history"""
    class Meta:
        unknown = EXCLUDE

    id = fields.String(allow_none=True, load_default=None)
    date = fields.String(required=True, validate=validate.Regexp(DATE_PATTERN))
    procedure = fields.String(required=True, validate=validate.Length(min=1, max=150))
    notes = fields.String(load_default='')
    professional_name = fields.String(load_default='')
    attachments = fields.List(fields.String(), load_default=list)


class ClinicalEvolutionSchema(Schema):
    """Input for a new clinical evolution; id and professional are filled in by the server"""
    class Meta:
        unknown = EXCLUDE

    procedure = fields.String(required=True, validate=validate.Length(min=1, max=150))
    notes = fields.String(load_default='')
    date = fields.String(load_default=today_iso, validate=validate.Regexp(DATE_PATTERN))
    attachments = fields.List(fields.String(), load_default=list)


class ClientSchema(RecordSchema):
    phone_fields = ('phone',)

    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    cpf = fields.String(load_default='', validate=validate.Length(max=20))
    birth_date = fields.String(load_default='', validate=validate.Regexp(OPTIONAL_DATE_PATTERN))
    phone = fields.String(load_default='')
    email = optional_email()
    address = fields.String(load_default='')
    clinical_notes = fields.String(load_default='')
    clinical_history = fields.List(fields.Nested(ClinicalRecordSchema), load_default=list)
    lgpd_consent = fields.Boolean(load_default=False)
    lgpd_timestamp = fields.String(allow_none=True, load_default=None)
    status = fields.String(load_default='LEAD', validate=validate.OneOf(CLIENT_STATUSES))
    source = fields.String(load_default='Instagram', validate=validate.OneOf(LEAD_SOURCES))
    tags = fields.List(fields.String(), load_default=list)
    last_procedure = fields.String(allow_none=True, load_default=None)
    total_spent = fields.Float(load_default=0, validate=validate.Range(min=0))
    photo_url = fields.String(allow_none=True, load_default=None)
