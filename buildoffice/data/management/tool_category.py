from buildoffice import db
from buildoffice.data.core.record_base import RecordBase


class ToolCategory(RecordBase):
    __tablename__ = 'tool_categories'

    name = db.Column(db.String(100), unique=True, nullable=False)
    color = db.Column(db.String(20), default='#64748b')

    tools = db.relationship('Tool', back_populates='category')

    def __repr__(self):
        return f'<ToolCategory {self.name}>'
