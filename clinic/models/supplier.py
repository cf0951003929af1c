from clinic import db
from . import BaseModel


class Supplier(BaseModel):
    __tablename__ = 'suppliers'

    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(30), nullable=True)
    contact_person = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    rating = db.Column(db.Float, nullable=True)
    last_order = db.Column(db.String(10), nullable=True)

    def __repr__(self):
        return f"<Supplier {self.name}>"
