from marshmallow import fields, validate

from . import RecordSchema, DATE_PATTERN
from ..constants import TRANSACTION_TYPES, TRANSACTION_STATUSES, PAYMENT_METHODS
from ..utils.helpers import today_iso


class TransactionSchema(RecordSchema):
    """
    Ledger row. ``client_id`` links an income to a client but is never checked
    against the client collection.
    """
    type = fields.String(required=True, validate=validate.OneOf(TRANSACTION_TYPES))
    category = fields.String(load_default='Procedimento', validate=validate.Length(max=60))
    description = fields.String(load_default='')
    value = fields.Float(required=True, validate=validate.Range(min=0))
    date = fields.String(load_default=today_iso, validate=validate.Regexp(DATE_PATTERN))
    status = fields.String(load_default='PAID', validate=validate.OneOf(TRANSACTION_STATUSES))
    payment_method = fields.String(allow_none=True, load_default=None,
                                   validate=validate.OneOf(PAYMENT_METHODS))
    client_id = fields.String(allow_none=True, load_default=None)


class ProcedurePackageSchema(RecordSchema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    description = fields.String(load_default='')
    price = fields.Float(load_default=0, validate=validate.Range(min=0))
    sessions = fields.Integer(load_default=1, validate=validate.Range(min=1))
    installments = fields.Integer(load_default=1, validate=validate.Range(min=1))
