"""
Logger hierarchy and JSON formatting
"""

import json
import logging

from buildoffice.logger import JsonFormatter, get_logger


def test_module_loggers_share_root_handlers():
    root = get_logger()
    child = get_logger("buildoffice.routes.warehouse")
    outsider = get_logger("reports")

    assert root.name == 'buildoffice'
    assert child.name == 'buildoffice.routes.warehouse'
    assert outsider.name == 'buildoffice.reports'
    assert root.handlers, "handlers are attached to the root application logger"
    assert get_logger() is root


def test_json_formatter():
    formatter = JsonFormatter({'level': 'levelname', 'message': 'message', 'logger': 'name'})
    record = logging.LogRecord('buildoffice.test', logging.WARNING, __file__, 10, 'Stock low: %s', ('Screws',), None)

    data = json.loads(formatter.format(record))

    assert data == {'level': 'WARNING', 'message': 'Stock low: Screws', 'logger': 'buildoffice.test'}
