from marshmallow import Schema, fields, validate, EXCLUDE

from . import RecordSchema, DATE_PATTERN, TIME_PATTERN
from ..constants import APPOINTMENT_STATUSES
from ..services.calendar_service import DAY_SLOTS


class AppointmentSchema(RecordSchema):
    client_id = fields.String(required=True, validate=validate.Length(min=1))
    professional_id = fields.String(load_default='')
    procedure = fields.String(load_default='')
    date = fields.String(required=True, validate=validate.Regexp(DATE_PATTERN))
    time = fields.String(load_default='08:00', validate=validate.Regexp(TIME_PATTERN))
    status = fields.String(load_default='SCHEDULED', validate=validate.OneOf(APPOINTMENT_STATUSES))
    reminder_sent = fields.Boolean(load_default=False)


class RescheduleSchema(Schema):
    """Payload of a drop on a day-view slot"""
    class Meta:
        unknown = EXCLUDE

    time = fields.String(required=True, validate=validate.OneOf(DAY_SLOTS))
