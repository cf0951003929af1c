# models/client.py

from clinic import db
from . import BaseModel


class Client(BaseModel):
    __tablename__ = 'clients'

    name = db.Column(db.String(150), nullable=False, index=True)
    cpf = db.Column(db.String(20), nullable=True, index=True)
    birth_date = db.Column(db.String(10), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    clinical_notes = db.Column(db.Text, nullable=True)
    clinical_history = db.Column(db.JSON, nullable=True)
    lgpd_consent = db.Column(db.Boolean, default=False)
    lgpd_timestamp = db.Column(db.String(40), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='LEAD')
    source = db.Column(db.String(30), nullable=True)
    tags = db.Column(db.JSON, nullable=True)
    last_procedure = db.Column(db.String(150), nullable=True)
    total_spent = db.Column(db.Float, default=0)
    photo_url = db.Column(db.String(500), nullable=True)

    def __repr__(self):
        return f"<Client {self.name} - {self.status}>"
