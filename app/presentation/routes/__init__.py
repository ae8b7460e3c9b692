"""
Routes package for the stock ledger
JSON blueprints over the slip engine, the read services and maintenance
"""

from app.logger import get_logger

logger = get_logger("stock_ledger.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from . import errors, slips, stock, asset_search, maintenance_tickets

    app.register_blueprint(errors.bp)
    app.register_blueprint(slips.bp)
    app.register_blueprint(stock.bp, url_prefix='/inventory')
    app.register_blueprint(asset_search.bp, url_prefix='/api')
    app.register_blueprint(maintenance_tickets.bp, url_prefix='/maintenance')

    logger.info("All route blueprints registered successfully")
