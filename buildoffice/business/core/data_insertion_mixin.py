"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict / to_dict / update_from_dict for the JSON server actions
"""

from buildoffice import db
from datetime import date, datetime
from sqlalchemy import inspect
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.core.data_insertion")

AUDIT_FIELDS = ('id', 'created_at', 'updated_at')


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - update_from_dict(): Apply a partial dictionary to an existing instance
    - create_from_dict(): Create and save model instance from dictionary
    - find_or_create_from_dict(): Idempotent creation keyed on lookup fields
    """

    @classmethod
    def _column_keys(cls):
        return {c.key for c in inspect(cls).columns}

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            skip_fields (list, optional): Fields to skip during creation

        Returns:
            Model instance (not saved to database)
        """
        skip_fields = set(skip_fields or ()) | set(AUDIT_FIELDS)
        columns = cls._column_keys()

        filtered_data = {
            key: value for key, value in data_dict.items()
            if key in columns and key not in skip_fields
        }
        return cls(**filtered_data)

    def update_from_dict(self, data_dict, skip_fields=None):
        """
        Apply the known columns of ``data_dict`` to this instance.

        Returns:
            set: Names of the columns whose value actually changed
        """
        skip_fields = set(skip_fields or ()) | set(AUDIT_FIELDS)
        columns = self._column_keys()
        changed = set()
        for key, value in data_dict.items():
            if key not in columns or key in skip_fields:
                continue
            if getattr(self, key) != value:
                setattr(self, key, value)
                changed.add(key)
        return changed

    def to_dict(self, include_audit_fields=True):
        """
        Convert model instance to dictionary

        Args:
            include_audit_fields (bool): Whether to include created/updated timestamps

        Returns:
            dict: JSON-ready representation of the model
        """
        result = {}
        for column in inspect(self.__class__).columns:
            if not include_audit_fields and column.key in ('created_at', 'updated_at'):
                continue
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                result[column.key] = value.isoformat()
            else:
                result[column.key] = value
        return result

    @classmethod
    def create_from_dict(cls, data_dict, skip_fields=None, commit=True):
        """
        Create and save a model instance from dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            skip_fields (list, optional): Fields to skip during creation
            commit (bool): Whether to commit the transaction

        Returns:
            Model instance (saved to database)
        """
        instance = cls.from_dict(data_dict, skip_fields)

        try:
            db.session.add(instance)
            if commit:
                db.session.commit()
                logger.info(f"Created {cls.__name__}: {instance}")
            return instance
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating {cls.__name__}: {e}")
            raise

    @classmethod
    def find_or_create_from_dict(cls, data_dict, lookup_fields, commit=True):
        """
        Find existing instance or create new one from dictionary

        Returns:
            tuple: (instance, created) where created is boolean
        """
        lookup_data = {field: data_dict[field] for field in lookup_fields if field in data_dict}
        if lookup_data:
            existing = cls.query.filter_by(**lookup_data).first()
            if existing:
                logger.debug(f"Found existing {cls.__name__}: {existing}")
                return existing, False

        return cls.create_from_dict(data_dict, commit=commit), True
