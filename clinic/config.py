import os
import logging
from datetime import timedelta


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ['true', 'on', '1']


def _env_float(name):
    value = os.environ.get(name)
    return float(value) if value not in (None, '') else None


class BaseConfig:
    """
    Base configuration class using environment variables
    """

    # Application settings
    APP_NAME = os.environ.get('APP_NAME', 'Clinic Management Dashboard')
    CLINIC_NAME = os.environ.get('CLINIC_NAME', 'Clínica Dra. Jéssica Motta')

    # Secret Key
    SECRET_KEY = os.environ.get('SECRET_KEY', 'fallback-secret-key-for-development')

    # Security settings
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE', 'true')
    SESSION_COOKIE_SAMESITE = os.environ.get('SESSION_COOKIE_SAMESITE', 'Lax')
    REMEMBER_COOKIE_DURATION = timedelta(days=14)
    # Signed-in sessions idle for longer are dropped from memory
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.environ.get('SESSION_IDLE_HOURS', 12)))
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Logging Configuration
    LOG_TO_STDOUT = _env_flag('LOG_TO_STDOUT')
    LOGGING_LEVEL = os.environ.get('LOGGING_LEVEL', 'INFO').upper()

    # File Upload Settings
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(16 * 1024 * 1024)))
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', '/tmp/uploads')
    MEDIA_URL_PREFIX = os.environ.get('MEDIA_URL_PREFIX', '/media')
    PHOTO_BUCKET = os.environ.get('PHOTO_BUCKET', 'clinical-photos')

    # Session load fan-out
    SESSION_LOAD_WORKERS = int(os.environ.get('SESSION_LOAD_WORKERS', 4))

    # Generative text
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY') or os.environ.get('API_KEY')
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-3-flash-preview')
    GEMINI_API_URL = os.environ.get('GEMINI_API_URL', 'https://generativelanguage.googleapis.com/v1beta')
    GEMINI_TIMEOUT = int(os.environ.get('GEMINI_TIMEOUT', 30))

    # Business figures that are inputs, not derived from the data
    FINANCE_NET_MARGIN = _env_float('FINANCE_NET_MARGIN')
    FINANCE_AVERAGE_TICKET = _env_float('FINANCE_AVERAGE_TICKET')
    OCCUPANCY_CAPACITY_SLOTS = int(os.environ.get('OCCUPANCY_CAPACITY_SLOTS', 30 * 14))
    NO_SHOW_ESTIMATE_RATIO = float(os.environ.get('NO_SHOW_ESTIMATE_RATIO', 0.2))

    # Seed account for the SQL driver
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')
    ADMIN_NAME = os.environ.get('ADMIN_NAME', 'Administrador')

    @classmethod
    def init_app(cls, app):
        """
        Configure logging and other app-specific initialization.
        :param app: Flask application instance
        """
        if cls.LOG_TO_STDOUT:
            formatter = logging.Formatter(
                '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
            )
            stream_handler = logging.StreamHandler()
            stream_handler.setFormatter(formatter)
            stream_handler.setLevel(cls.LOGGING_LEVEL)
            app.logger.addHandler(stream_handler)

        app.logger.setLevel(cls.LOGGING_LEVEL)
        app.logger.info(f"{cls.APP_NAME} initialized with {cls.__name__}")
        app.logger.debug(f"SESSION_COOKIE_SECURE: {cls.SESSION_COOKIE_SECURE}")
        app.logger.debug(f"SESSION_LOAD_WORKERS: {cls.SESSION_LOAD_WORKERS}")


class BackendConfig:
    """
    Backend collaborator settings.

    ``BACKEND_URL`` selects the driver: an ``http(s)://`` URL talks to a hosted
    PostgREST-style backend, anything else is handed to SQLAlchemy as a
    database URI.
    """
    BACKEND_URL = os.environ.get('BACKEND_URL') or os.environ.get('SUPABASE_URL')
    BACKEND_KEY = os.environ.get('BACKEND_KEY') or os.environ.get('SUPABASE_ANON_KEY')
    BACKEND_TIMEOUT = int(os.environ.get('BACKEND_TIMEOUT', 15))

    # SQLAlchemy Settings
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_POOL_SIZE = int(os.environ.get('DATABASE_POOL_SIZE', 10))
    SQLALCHEMY_ECHO = _env_flag('SQLALCHEMY_ECHO')
    SLOW_QUERY_THRESHOLD = float(os.environ.get('SLOW_QUERY_THRESHOLD', 0.5))


PLACEHOLDER_BACKEND_HOSTS = ('seu-projeto.supabase.co', 'placeholder.supabase.co')


def missing_backend_settings(config):
    """
    Return the names of the backend settings that are absent or still hold a
    placeholder value.
    """
    missing = []
    url = config.get('BACKEND_URL')
    if not url or any(host in url for host in PLACEHOLDER_BACKEND_HOSTS):
        missing.append('BACKEND_URL')
    if not config.get('BACKEND_KEY'):
        missing.append('BACKEND_KEY')
    return missing


def backend_driver(url):
    return 'rest' if url.startswith(('http://', 'https://')) else 'sql'


class DevelopmentConfig(BaseConfig, BackendConfig):
    """
    Development-specific configuration
    """
    DEBUG = True
    SESSION_COOKIE_SECURE = False


class ProductionConfig(BaseConfig, BackendConfig):
    """
    Production-specific configuration
    """
    DEBUG = False


class TestingConfig(BaseConfig, BackendConfig):
    """
    Testing-specific configuration
    """
    TESTING = True
    BACKEND_URL = 'sqlite:///:memory:'
    BACKEND_KEY = 'test-key'
    SESSION_COOKIE_SECURE = False
    SESSION_LOAD_WORKERS = 1
    GEMINI_API_KEY = 'test-gemini-key'
    ADMIN_EMAIL = 'admin@clinic.test'
    ADMIN_PASSWORD = 'secret123'
    ADMIN_NAME = 'Dra. Elena Ramos'
    FINANCE_NET_MARGIN = None
    FINANCE_AVERAGE_TICKET = None
    OCCUPANCY_CAPACITY_SLOTS = 420
    NO_SHOW_ESTIMATE_RATIO = 0.2


def get_config(config_name):
    """
    Factory function to return the appropriate configuration class

    :param config_name: Name of the configuration ('development', 'production', 'testing')
    :return: Configuration class
    """
    config_mapping = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_mapping.get(config_name.lower(), DevelopmentConfig)
