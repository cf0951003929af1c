from flask import Flask, jsonify, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_cors import CORS
import structlog
from sqlalchemy import event
from sqlalchemy.engine import Engine
from retry import retry
import time

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
logger = structlog.get_logger()


# Database connection retry decorator
@retry(tries=3, delay=2, backoff=2)
def check_db_connection(app):
    """Open one connection to the configured database, retrying on failure"""
    try:
        with app.app_context():
            with db.engine.connect():
                pass
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        raise


def init_db_with_retry(app):
    """Register the database extension once, then check the connection with retries"""
    db.init_app(app)
    check_db_connection(app)


def create_app(config_name, config_overrides=None):
    """
    Application factory function to create and configure the Flask application

    Args:
        config_name (str): Name of the configuration environment
                           ('development', 'production', 'testing').
        config_overrides (dict): Settings applied on top of the configuration class

    Returns:
        Flask: Configured Flask application instance
    """
    # Import config dynamically to avoid circular imports
    from .config import get_config, backend_driver, missing_backend_settings

    app = Flask(__name__)

    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)
    config_class.init_app(app)

    cors_options = {
        'origins': app.config['CORS_ORIGINS'],
        'methods': ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS', 'PATCH'],
        'allow_headers': ['Content-Type', 'Authorization', 'Cache-Control', 'Pragma'],
        'supports_credentials': True
    }
    CORS(app, **cors_options)
    logger.debug(f"CORS Origins configured: {app.config['CORS_ORIGINS']}")

    missing = missing_backend_settings(app.config)
    app.config['BACKEND_MISSING_SETTINGS'] = missing
    app.config['BACKEND_DRIVER'] = None if missing else backend_driver(app.config['BACKEND_URL'])

    if missing:
        # The service still starts so it can answer with the setup screen
        logger.warning(f"Backend not configured, missing: {', '.join(missing)}")
        _configure_setup_mode(app, missing)
    elif app.config['BACKEND_DRIVER'] == 'sql':
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['BACKEND_URL']
        _configure_database(app)
        init_db_with_retry(app)
        migrate.init_app(app, db, directory=app.config.get('MIGRATIONS_DIR', 'migrations'))
        with app.app_context():
            _init_database_models(app)

    from .state import StateRegistry
    app.extensions['clinic_sessions'] = StateRegistry(idle_timeout=app.config['PERMANENT_SESSION_LIFETIME'])

    _configure_security(app)
    _configure_login_manager(app)

    _register_blueprints(app)
    _setup_error_handlers(app)

    app.logger.info(f"Starting application in {config_name} mode "
                    f"(backend driver: {app.config['BACKEND_DRIVER'] or 'unconfigured'})")
    return app


def _register_blueprints(app):
    """
    Register application blueprints

    Args:
        app (Flask): Flask application instance
    """
    from .routes import (
        auth_bp,
        session_bp,
        dashboard_bp,
        clients_bp,
        calendar_bp,
        funnel_bp,
        finance_bp,
        chat_bp,
        marketing_bp,
        settings_bp,
        suppliers_bp,
        analytics_bp,
        reports_bp,
        media_bp
    )

    blueprints = [
        (auth_bp, '/auth'),
        (session_bp, '/session'),
        (dashboard_bp, '/dashboard'),
        (clients_bp, '/clients'),
        (calendar_bp, '/calendar'),
        (funnel_bp, '/funnel'),
        (finance_bp, '/finance'),
        (chat_bp, '/chat'),
        (marketing_bp, '/marketing'),
        (settings_bp, '/settings'),
        (suppliers_bp, '/suppliers'),
        (analytics_bp, '/analytics'),
        (reports_bp, '/reports'),
        (media_bp, '/media')
    ]

    for blueprint, url_prefix in blueprints:
        app.register_blueprint(blueprint, url_prefix=url_prefix)


def _setup_error_handlers(app):
    """
    Set up custom error handlers for the application

    Args:
        app (Flask): Flask application instance
    """
    from .errors import ClinicError

    @app.errorhandler(ClinicError)
    def handle_clinic_error(error):
        app.logger.warning(f'{type(error).__name__}: {error.message}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def page_not_found(error):
        app.logger.error(f'Page not found: {error}')
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def internal_server_error(error):
        app.logger.error(f'Server Error: {error}')
        if app.config.get('BACKEND_DRIVER') == 'sql':
            db.session.rollback()
        return jsonify({"error": "An unexpected error occurred"}), 500


def _configure_setup_mode(app, missing):
    """Answer every request with the connect-your-backend screen"""

    @app.before_request
    def require_backend_configuration():
        return jsonify({
            "screen": "setup",
            "error": "Backend configuration missing",
            "required": missing,
            "action": "reload"
        }), 503


def _configure_database(app):
    """Configure database specific settings"""
    if 'postgresql' in app.config['SQLALCHEMY_DATABASE_URI']:
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'pool_size': app.config.get('SQLALCHEMY_POOL_SIZE', 10),
            'pool_pre_ping': True,
        }

    # Configure SQLAlchemy performance monitoring
    @event.listens_for(Engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(Engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total = time.time() - conn.info['query_start_time'].pop()
        if total > app.config.get('SLOW_QUERY_THRESHOLD', 0.5):
            logger.warning(f"Slow query detected: {total:.2f}s\n{statement}")


def _configure_security(app):
    """Configure security headers and session cookies"""

    @app.after_request
    def add_security_headers(response):
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Content-Security-Policy'] = app.config.get(
            'CONTENT_SECURITY_POLICY',
            "default-src 'self'"
        )
        return response

    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config.setdefault('SESSION_COOKIE_SAMESITE', 'Lax')


def _init_database_models(app):
    """Create tables for the SQL driver and seed the first admin account"""
    from .models.user import init_admin_account
    from . import models  # noqa: F401

    db.create_all()

    try:
        init_admin_account(app)
    except Exception as e:
        app.logger.warning(f"Admin account initialization skipped: {str(e)}")


def _configure_login_manager(app):
    """Configure Flask-Login against the in-process session registry"""
    login_manager.init_app(app)
    login_manager.session_protection = "strong"

    @login_manager.user_loader
    def load_user(session_id):
        registry = current_app.extensions['clinic_sessions']
        return registry.get(session_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({
            "screen": "login",
            "error": "Unauthorized",
            "message": "You must be logged in to access this resource"
        }), 401

    app.logger.info("Login manager configured")
