from buildoffice import db
from buildoffice.data.core.record_base import RecordBase


class CostEstimateItem(RecordBase):
    __tablename__ = 'cost_estimate_items'

    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    section = db.Column(db.String(200), nullable=True)
    description = db.Column(db.String(500), nullable=False)
    quantity = db.Column(db.Float, default=1.0)
    unit = db.Column(db.String(20), default='pcs')
    unit_net_price = db.Column(db.Float, default=0.0)
    tax_rate = db.Column(db.Float, default=23.0)

    project = db.relationship('Project', back_populates='cost_estimate_items')

    def __repr__(self):
        return f'<CostEstimateItem {self.description}>'
