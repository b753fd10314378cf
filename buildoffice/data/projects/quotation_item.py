from buildoffice import db
from buildoffice.data.core.record_base import RecordBase


class QuotationItem(RecordBase):
    """Quotation line; ``price_with_margin`` and ``total`` are stored as computed when saved"""
    __tablename__ = 'quotation_items'

    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    section = db.Column(db.String(200), nullable=True)
    description = db.Column(db.String(500), nullable=False)
    quantity = db.Column(db.Float, default=1.0)
    unit = db.Column(db.String(20), default='pcs')
    unit_price = db.Column(db.Float, default=0.0)
    margin = db.Column(db.Float, default=0.0)
    price_with_margin = db.Column(db.Float, default=0.0)
    total = db.Column(db.Float, default=0.0)

    project = db.relationship('Project', back_populates='quotation_items')

    def __repr__(self):
        return f'<QuotationItem {self.description}: {self.total}>'
