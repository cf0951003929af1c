from marshmallow import Schema, fields, validate, EXCLUDE

from . import RecordSchema, DATE_PATTERN
from ..constants import FUNNEL_STAGE_IDS, DEAL_LABELS
from ..utils.helpers import today_iso


class DealSchema(RecordSchema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=150))
    client_id = fields.String(load_default='')
    value = fields.Float(load_default=0, validate=validate.Range(min=0))
    stage_id = fields.String(load_default='new', validate=validate.OneOf(FUNNEL_STAGE_IDS))
    expected_close_date = fields.String(load_default=today_iso, validate=validate.Regexp(DATE_PATTERN))
    label = fields.String(load_default='Novo', validate=validate.OneOf(DEAL_LABELS))


class MoveDealSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    stage_id = fields.String(required=True)
