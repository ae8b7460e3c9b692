from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from app.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    """
    Application factory for the stock ledger.

    Args:
        test_config (dict, optional): Config values applied after the environment
            is read. Tests use this to point at an in-memory database.
    """
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("stock_ledger")
    logger.info("Initializing Flask application")

    # SECURITY: Require SECRET_KEY in environment - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    if test_config and test_config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = test_config['SECRET_KEY']
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite file in instance/
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir = Path(__file__).parent.parent / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'stock_ledger.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Session cookie security configuration
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '3600'))

    # Page sizes for list endpoints
    app.config['DEFAULT_PAGE_SIZE'] = int(os.environ.get('DEFAULT_PAGE_SIZE', '50'))
    app.config['LOW_STOCK_PAGE_SIZE'] = int(os.environ.get('LOW_STOCK_PAGE_SIZE', '100'))

    if test_config:
        app.config.update(test_config)

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':')[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from app.data.core.user_info.user import User
    from app.data.core.property import Property
    from app.data.core.location import Location
    from app.data.core.item import Item
    from app.data.core.asset import Asset
    from app.data.core.audit_event import AuditEvent
    from app.data.inventory.stock_balance import StockBalance
    from app.data.inventory.movement_log import MovementLog
    from app.data.slips.slip import Slip
    from app.data.slips.slip_line import SlipLine
    from app.data.slips.signature import Signature
    from app.data.slips.slip_sequence import SlipSequence
    from app.data.maintenance.maintenance_ticket import MaintenanceTicket
    from app.data.maintenance.maintenance_log import MaintenanceLog

    logger.debug("Models imported and registered")

    # Register blueprints
    from app.auth import auth
    from app.presentation.routes import init_app as init_routes

    app.register_blueprint(auth)
    init_routes(app)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        return response

    logger.info("Flask application initialization complete")

    return app
