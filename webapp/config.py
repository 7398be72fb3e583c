import os

from dotenv import load_dotenv

from core.system_settings_defaults import DEFAULT_APPLICATION_SETTINGS

load_dotenv()


def _default(name: str):
    return DEFAULT_APPLICATION_SETTINGS.get(name)


def _env(name: str):
    value = os.environ.get(name)
    return value if value not in (None, "") else _default(name)


def _env_int(name: str) -> int:
    return int(_env(name))


def _env_bool(name: str) -> bool:
    value = _env(name)
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _env_list(name: str) -> list[str]:
    value = _env(name)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value or [])


class BaseApplicationSettings:
    """Base Flask configuration resolved from the environment and defaults."""

    SECRET_KEY = _env("SECRET_KEY")
    CSRF_SECRET_KEY = _env("CSRF_SECRET_KEY")
    CSRF_TOKEN_MAX_AGE_MS = _env_int("CSRF_TOKEN_MAX_AGE_MS")
    CSRF_TOKEN_MAX_CLOCK_SKEW_MS = _env_int("CSRF_TOKEN_MAX_CLOCK_SKEW_MS")

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    db_uri = os.environ.get("DATABASE_URI", "sqlite://")
    SQLALCHEMY_DATABASE_URI = db_uri

    # Session settings
    PERMANENT_SESSION_LIFETIME = _env_int("PERMANENT_SESSION_LIFETIME")
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE")
    SESSION_COOKIE_HTTPONLY = _env_bool("SESSION_COOKIE_HTTPONLY")
    SESSION_COOKIE_SAMESITE = _env("SESSION_COOKIE_SAMESITE")

    # Request limits
    MAX_CONTENT_LENGTH = _env_int("MAX_CONTENT_LENGTH")
    RATE_LIMIT_API_MAX_REQUESTS = _env_int("RATE_LIMIT_API_MAX_REQUESTS")
    RATE_LIMIT_API_WINDOW_SECONDS = _env_int("RATE_LIMIT_API_WINDOW_SECONDS")
    RATE_LIMIT_SENSITIVE_MAX_REQUESTS = _env_int("RATE_LIMIT_SENSITIVE_MAX_REQUESTS")
    RATE_LIMIT_SENSITIVE_WINDOW_SECONDS = _env_int("RATE_LIMIT_SENSITIVE_WINDOW_SECONDS")

    ALLOWED_REDIRECT_HOSTS = _env_list("ALLOWED_REDIRECT_HOSTS")
    HSTS_MAX_AGE_SECONDS = _env_int("HSTS_MAX_AGE_SECONDS")
    AUDIT_LOG_CAPACITY = _env_int("AUDIT_LOG_CAPACITY")
    PROVISION_SAMPLE_THREATS = _env_bool("PROVISION_SAMPLE_THREATS")

    # Internationalisation
    LANGUAGES = _env_list("LANGUAGES") or ["en", "ja"]
    BABEL_TRANSLATION_DIRECTORIES = os.path.join(
        os.path.dirname(__file__), "translations"
    )
    BABEL_DEFAULT_LOCALE = _default("BABEL_DEFAULT_LOCALE")
    BABEL_DEFAULT_TIMEZONE = _default("BABEL_DEFAULT_TIMEZONE")

    # Database stability
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }

    if not db_uri.startswith("sqlite"):
        SQLALCHEMY_ENGINE_OPTIONS.update({
            "pool_size": 10,
            "max_overflow": 20,
        })
        if db_uri.startswith("mysql"):
            SQLALCHEMY_ENGINE_OPTIONS["connect_args"] = {"connect_timeout": 10}

    # OpenAPI
    API_TITLE = "Cerberus Shield API"
    API_VERSION = "1.0.0"
    OPENAPI_VERSION = "3.0.3"
    OPENAPI_URL_PREFIX = "/api"
    OPENAPI_JSON_PATH = "openapi.json"


class Config(BaseApplicationSettings):
    pass


class TestConfig(BaseApplicationSettings):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    CSRF_SECRET_KEY = "test-csrf-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    PROVISION_SAMPLE_THREATS = False
    RATE_LIMIT_API_MAX_REQUESTS = 10_000
    RATE_LIMIT_SENSITIVE_MAX_REQUESTS = 10_000
