from clinic import db
from . import BaseModel


class Transaction(BaseModel):
    __tablename__ = 'transactions'

    type = db.Column(db.String(10), nullable=False)
    category = db.Column(db.String(60), nullable=True)
    description = db.Column(db.String(255), nullable=True)
    value = db.Column(db.Float, nullable=False, default=0)
    date = db.Column(db.String(10), nullable=True, index=True)
    status = db.Column(db.String(10), nullable=False, default='PENDING')
    payment_method = db.Column(db.String(20), nullable=True)
    client_id = db.Column(db.String(64), nullable=True)

    def __repr__(self):
        return f"<Transaction {self.type} {self.value}>"


class ProcedurePackage(BaseModel):
    __tablename__ = 'packages'

    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Float, default=0)
    sessions = db.Column(db.Integer, default=1)
    installments = db.Column(db.Integer, default=1)

    def __repr__(self):
        return f"<ProcedurePackage {self.name}>"
