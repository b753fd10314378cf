"""
Model registration for the back office.
Importing the packages below registers every table with SQLAlchemy.
"""

from buildoffice.logger import get_logger

logger = get_logger("buildoffice.data.build")


def import_models():
    """Import all model modules so ``db.create_all`` and migrations see them"""
    from buildoffice.data import management, warehouse, projects  # noqa: F401
    logger.debug("Data models imported")
