"""
Pytest configuration and fixtures
"""
import os
from datetime import date

import pytest

os.environ.setdefault('SECRET_KEY', 'test-secret-key')

from buildoffice import create_app
from buildoffice import db as _db


@pytest.fixture(scope='function')
def app():
    """Create Flask application with a fresh in-memory database"""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'APP_ORIGIN': 'https://office.example.com',
    })

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture
def project(app):
    from buildoffice.business.projects.project_context import ProjectContext
    return ProjectContext.create({'name': 'Bathroom renovation', 'address': 'Lipowa 5'})


@pytest.fixture
def employee(app):
    from buildoffice.business.management.employee_context import EmployeeContext
    return EmployeeContext.create({'first_name': 'Jan', 'last_name': 'Kowalski', 'position': 'Foreman'})


@pytest.fixture
def tool(app, employee):
    from buildoffice.business.management.tool_context import ToolContext
    return ToolContext.create({
        'name': 'Hammer drill',
        'brand': 'Hilti',
        'serial_number': 'HT-1',
        'last_inspection_date': '2026-01-15',
        'inspection_interval': '6',
        'employee_ids': [employee.id],
    })


@pytest.fixture
def today():
    return date(2026, 3, 1)
