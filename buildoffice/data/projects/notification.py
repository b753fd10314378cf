from buildoffice import db
from buildoffice.data.core.record_base import RecordBase


class Notification(RecordBase):
    __tablename__ = 'notifications'

    type = db.Column(db.String(50), nullable=False)  # e.g. order_status
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, default=False, nullable=False)
    related_id = db.Column(db.Integer, nullable=True)
    related_type = db.Column(db.String(50), nullable=True)

    def __repr__(self):
        return f'<Notification {self.type}: {self.title}>'
