#!/usr/bin/env python3
"""
Build orchestrator for the back office
Creates the tables, inserts critical data and optional debug data
"""

import json
from pathlib import Path

from buildoffice import db
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.build")

CRITICAL_DATA_FILE = Path(__file__).parent / 'data' / 'build_data_critical.json'


def verify_critical_data():
    """
    Verify that critical data is present in the database

    Returns:
        bool: True if every default tool category exists
    """
    from buildoffice.data.management.tool_category import ToolCategory

    with open(CRITICAL_DATA_FILE, 'r') as f:
        critical_data = json.load(f)
    names = {c['name'] for c in critical_data['Tool_Categories']}
    present = {c.name for c in ToolCategory.query.filter(ToolCategory.name.in_(names)).all()}
    missing = names - present
    if missing:
        logger.warning(f"Default tool categories missing: {sorted(missing)}")
        return False
    return True


def insert_critical_data():
    """
    Insert critical data that must always be present

    Loads buildoffice/data/build_data_critical.json. Called on every build,
    regardless of flags.

    Raises:
        FileNotFoundError: If the critical data file is missing
    """
    if not CRITICAL_DATA_FILE.exists():
        error_msg = f"Critical data file not found: {CRITICAL_DATA_FILE}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    from buildoffice.data.management.tool_category import ToolCategory

    with open(CRITICAL_DATA_FILE, 'r') as f:
        critical_data = json.load(f)

    logger.info("Inserting default tool categories...")
    for category in critical_data['Tool_Categories']:
        ToolCategory.find_or_create_from_dict(category, lookup_fields=['name'], commit=False)
    db.session.commit()
    logger.info("Successfully inserted critical data")


def build_database(enable_debug_data=True, build_only=False):
    """
    Create all tables, then insert critical data and, unless disabled, debug data.

    Must run inside an application context.
    """
    from buildoffice.data.build import import_models

    import_models()
    db.create_all()
    logger.info("Database tables created")

    insert_critical_data()

    if build_only or not enable_debug_data:
        logger.info("Skipping debug data")
        return

    from buildoffice.debug.debug_data_manager import insert_debug_data
    summary = insert_debug_data(enabled=True)
    logger.info(f"Debug data summary: {summary}")
