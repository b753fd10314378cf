from buildoffice import db
from buildoffice.data.core.record_base import RecordBase


class Supplier(RecordBase):
    __tablename__ = 'suppliers'

    name = db.Column(db.String(200), nullable=False)
    contact_person = db.Column(db.String(200), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    phone = db.Column(db.String(50), nullable=True)

    orders = db.relationship('Order', back_populates='supplier')

    def __repr__(self):
        return f'<Supplier {self.name}>'
