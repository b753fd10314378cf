"""
Routes package for the construction back office
Organized in a tiered structure mirroring the model organization
"""

from buildoffice.logger import get_logger

logger = get_logger("buildoffice.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from . import main, public, warehouse, notifications
    from .management import employees, tools
    from .projects import projects, orders, quotations, cost_estimates

    app.register_blueprint(main.bp)
    app.register_blueprint(public.bp)
    app.register_blueprint(notifications.bp, url_prefix='/api/notifications')

    app.register_blueprint(employees.bp, url_prefix='/api/employees')
    app.register_blueprint(tools.bp, url_prefix='/api/tools')

    app.register_blueprint(warehouse.bp, url_prefix='/api/warehouse')

    app.register_blueprint(projects.bp, url_prefix='/api/projects')
    app.register_blueprint(orders.bp, url_prefix='/api')
    app.register_blueprint(quotations.bp, url_prefix='/api/projects')
    app.register_blueprint(cost_estimates.bp, url_prefix='/api/projects')

    logger.info("All route blueprints registered successfully")
