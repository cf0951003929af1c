from clinic import db
from . import BaseModel


class Appointment(BaseModel):
    __tablename__ = 'appointments'

    client_id = db.Column(db.String(64), nullable=True, index=True)
    professional_id = db.Column(db.String(64), nullable=True, index=True)
    procedure = db.Column(db.String(150), nullable=True)
    date = db.Column(db.String(10), nullable=False, index=True)
    time = db.Column(db.String(5), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='SCHEDULED')
    reminder_sent = db.Column(db.Boolean, default=False)

    def __repr__(self):
        return f"<Appointment {self.date} {self.time} - {self.procedure}>"
