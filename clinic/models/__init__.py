# models/__init__.py
from .. import db
from datetime import datetime


class BaseModel(db.Model):
    """
    Base model with common fields for all tables of the SQL driver.

    Identifiers are generated by the caller at save time, so the primary key
    is a string rather than an autoincrement integer.
    """
    __abstract__ = True

    id = db.Column(db.String(64), primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    _audit_columns = ('created_at', 'updated_at')

    def save(self):
        """
        Save the current model instance to the database.
        If an exception occurs, rollback the session to maintain session consistency.
        """
        try:
            db.session.add(self)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            raise e

    def delete(self):
        """
        Delete the current model instance from the database
        """
        try:
            db.session.delete(self)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            raise e

    @classmethod
    def get_by_id(cls, id):
        return db.session.get(cls, id)

    @classmethod
    def record_columns(cls):
        return [c.name for c in cls.__table__.columns if c.name not in cls._audit_columns]

    @classmethod
    def from_record(cls, record):
        """Build an instance holding every record column; absent keys become NULL."""
        return cls(**{name: record.get(name) for name in cls.record_columns()})

    def to_record(self):
        return {name: getattr(self, name) for name in self.record_columns()}


# Import order matters
from .user import Profile, AuthAccount
from .client import Client
from .appointment import Appointment
from .finance import Transaction, ProcedurePackage
from .deal import Deal
from .supplier import Supplier
