import json

from buildoffice import db
from buildoffice.data.core.record_base import RecordBase


class ToolProtocol(RecordBase):
    """
    Periodic electrical-tool inspection record.

    ``content`` keeps the full checklist answers as JSON so the PDF can be
    regenerated exactly as it was filled in.
    """
    __tablename__ = 'tool_protocols'

    tool_id = db.Column(db.Integer, db.ForeignKey('tools.id'), nullable=False)
    protocol_number = db.Column(db.String(50), nullable=True)
    date = db.Column(db.Date, nullable=False)
    place = db.Column(db.String(200), nullable=True)
    inspector_name = db.Column(db.String(200), nullable=False)
    result = db.Column(db.String(20), nullable=False)  # POSITIVE/NEGATIVE
    validity_months = db.Column(db.Integer, default=6)
    next_inspection_date = db.Column(db.Date, nullable=True)
    content = db.Column(db.Text, nullable=True)

    tool = db.relationship('Tool', back_populates='protocols')

    def __repr__(self):
        return f'<ToolProtocol {self.protocol_number} tool={self.tool_id}: {self.result}>'

    @property
    def checklist(self):
        """Decoded checklist answers"""
        if not self.content:
            return {}
        return json.loads(self.content)

    @checklist.setter
    def checklist(self, value):
        self.content = json.dumps(value or {}, default=str)
