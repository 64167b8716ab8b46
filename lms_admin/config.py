"""
GrowthMindz Admin - Configuration Management
Environment-based configuration for production, development, testing
"""
import os
from datetime import timedelta


def _env_flag(name, default):
    return os.environ.get(name, default).lower() == 'true'


def _database_url():
    """DATABASE_URL if set, otherwise a PostgreSQL URL built from the PG* variables"""
    uri = os.environ.get('DATABASE_URL')
    if uri:
        # Render/Heroku style URLs
        if uri.startswith('postgres://'):
            uri = uri.replace('postgres://', 'postgresql://', 1)
        return uri

    user = os.environ.get('PGUSER', 'postgres')
    password = os.environ.get('PGPASSWORD', '')
    host = os.environ.get('PGHOST', 'localhost')
    port = os.environ.get('PGPORT', '5432')
    database = os.environ.get('PGDATABASE', 'grw_db')
    credentials = f"{user}:{password}" if password else user
    return f"postgresql+psycopg2://{credentials}@{host}:{port}/{database}"


class Config:
    """Base configuration"""
    # App
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'growthmindz-admin-secret-change-in-production'
    APP_NAME = 'GrowthMindz Admin'
    VERSION = '1.0.0'

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    # Run the schema reconciler before serving requests
    SCHEMA_RECONCILE_ON_STARTUP = _env_flag('SCHEMA_RECONCILE_ON_STARTUP', 'true')

    # JWT Configuration
    JWT_SECRET_KEY = (os.environ.get('JWT_SECRET_KEY') or os.environ.get('JWT_SECRET')
                      or 'your-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_ALGORITHM = 'HS256'

    # Passwords
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', 12))
    PASSWORD_MIN_LENGTH = 6

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Rate Limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')
    RATELIMIT_DEFAULT = "200 per minute"

    # Roles accepted at login
    ADMIN_ROLES = ('Admin', 'Staff')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True

    # Use SQLite for easy development (can switch to PostgreSQL)
    USE_SQLITE = _env_flag('USE_SQLITE', 'false')
    if USE_SQLITE:
        SQLALCHEMY_DATABASE_URI = 'sqlite:///growthmindz_dev.db'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False
    JWT_SECRET_KEY = 'test-secret-key-for-testing'
    BCRYPT_LOG_ROUNDS = 4


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_size': int(os.environ.get('DB_POOL_SIZE', 10)),
        'max_overflow': int(os.environ.get('DB_MAX_OVERFLOW', 20)),
        'pool_recycle': 300,
    }

    # Ensure secrets are set
    @classmethod
    def validate(cls):
        missing = []
        if not os.environ.get('SECRET_KEY'):
            missing.append('SECRET_KEY')
        if not (os.environ.get('JWT_SECRET') or os.environ.get('JWT_SECRET_KEY')):
            missing.append('JWT_SECRET')
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
