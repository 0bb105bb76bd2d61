import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-key-change-in-production"
    FLASK_ENV = os.environ.get("FLASK_ENV", "production")
    DEBUG = os.environ.get("FLASK_DEBUG", "False").lower() == "true"

    PERMANENT_SESSION_LIFETIME = timedelta(hours=8)
    SESSION_COOKIE_SECURE = FLASK_ENV == "production"
    SESSION_COOKIE_HTTPONLY = True

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 10,
        "max_overflow": 20,
        "connect_args": {"connect_timeout": 10},
    }

    # Database URI logic
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or (
        f"postgresql://{os.environ.get('POSTGRES_USER', 'postgres')}:"
        f"{os.environ.get('POSTGRES_PASSWORD', 'password')}@"
        f"{os.environ.get('POSTGRES_HOST', 'localhost')}:{os.environ.get('POSTGRES_PORT', '5432')}/"
        f"{os.environ.get('POSTGRES_DB', 'railway_police')}"
    )

    # Access gate routing
    ACCESS_GATE_ENABLED = os.environ.get("ACCESS_GATE_ENABLED", "True").lower() == "true"
    LOGIN_PATH = "/login"
    CHANGE_PASSWORD_PATH = "/change-password"
    DASHBOARD_PATH = "/dashboard"
    PUBLIC_PATHS = ("/",)
    AUTH_PATH_PREFIXES = ("/login", "/change-password")
    # First path segments (exact match) the gate never sees (APIs, assets, load balancer probes)
    ACCESS_GATE_EXEMPT_PREFIXES = ("api", "static", "health")

    # Roles allowed to use the portal; "viewer" accounts exist but are turned away
    PORTAL_ROLES = ("super_admin", "district_admin", "station_officer", "data_operator")
    ADMIN_ROLES = ("super_admin", "admin")

    LOGIN_RATE_LIMIT = os.environ.get("LOGIN_RATE_LIMIT", "10 per minute")
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    # Cache configuration
    CACHE_TYPE = "SimpleCache"  # In-memory, thread-safe
    CACHE_DEFAULT_TIMEOUT = 300  # 5 minutes
    CACHE_KEY_PREFIX = "rpf_"


class DevelopmentConfig(Config):
    DEBUG = True
    FLASK_ENV = "development"


class ProductionConfig(Config):
    DEBUG = False
    FLASK_ENV = "production"


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SECRET_KEY = "test-secret-key-for-testing-only"
    ACCESS_GATE_ENABLED = True
    RATELIMIT_ENABLED = False

    # Disable caching in tests to avoid stale data
    CACHE_TYPE = "NullCache"  # No caching during tests
    CACHE_NO_NULL_WARNING = True


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": ProductionConfig,
}
