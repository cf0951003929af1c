from clinic import db
from . import BaseModel


class Deal(BaseModel):
    __tablename__ = 'deals'

    title = db.Column(db.String(150), nullable=False)
    client_id = db.Column(db.String(64), nullable=True)
    value = db.Column(db.Float, default=0)
    stage_id = db.Column(db.String(20), nullable=False, default='new')
    expected_close_date = db.Column(db.String(10), nullable=True)
    label = db.Column(db.String(20), nullable=True)

    def __repr__(self):
        return f"<Deal {self.title} @ {self.stage_id}>"
