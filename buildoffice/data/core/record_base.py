from buildoffice import db
from datetime import datetime
from sqlalchemy.orm import declared_attr
from buildoffice.business.core.data_insertion_mixin import DataInsertionMixin


class RecordBase(db.Model, DataInsertionMixin):
    """Abstract base class for all back-office records with timestamps"""

    __abstract__ = True

    @declared_attr
    def __tablename__(cls):
        return cls.__name__.lower() + 's'

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SoftDeleteMixin:
    """
    Soft delete flag shared by records that go to the trash instead of being removed.

    ``is_deleted`` is an integer (0 = active, 1 = deleted) to stay compatible
    with data imported from the previous system.
    """

    is_deleted = db.Column(db.Integer, default=0, nullable=False)
    deleted_at = db.Column(db.DateTime, nullable=True)

    @classmethod
    def active(cls):
        """Query of the records that are not soft-deleted"""
        return cls.query.filter(cls.is_deleted == 0)

    def soft_delete(self):
        self.is_deleted = 1
        self.deleted_at = datetime.utcnow()

    def restore(self):
        self.is_deleted = 0
        self.deleted_at = None
