import os
from pathlib import Path

from dotenv import load_dotenv


_PACKAGE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _PACKAGE_DIR.parent

# Root .env is canonical; modshop/.env remains a fallback for local overrides.
load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv(_PACKAGE_DIR / ".env")


def _first_non_empty_env(*names: str, default: str) -> str:
    """Returns the first non-empty env var value from `names`, else `default`."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value != "":
            return value
    return default


def _parse_int_env(*names: str, default: int) -> int:
    """Parses the first non-empty env var in `names` as int, else returns `default`."""
    raw = _first_non_empty_env(*names, default=str(default))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _parse_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:

    # Flask/session secret. Falls back to JWT_SECRET_KEY for compatibility.
    SECRET_KEY: str = _first_non_empty_env(
        "SECRET_KEY",
        "JWT_SECRET_KEY",
        default="change-me-in-production",
    )

    # JWT signing secret. Falls back to SECRET_KEY for compatibility.
    JWT_SECRET_KEY: str = _first_non_empty_env(
        "JWT_SECRET_KEY",
        "SECRET_KEY",
        default="change-me-in-production",
    )

    JWT_ISSUER: str = _first_non_empty_env("JWT_ISSUER", default="modshop-api")
    JWT_AUDIENCE: str = _first_non_empty_env("JWT_AUDIENCE", default="modshop-clients")
    JWT_EXPIRATION_MINUTES: int = _parse_int_env("JWT_EXPIRATION_MINUTES", default=60)
    JWT_ALGORITHM: str = "HS256"
    BCRYPT_LOG_ROUNDS: int = 12

    # New registrations are enrolled in this group when it exists.
    DEFAULT_USER_GROUP: str = _first_non_empty_env("DEFAULT_USER_GROUP", default="Users")

    # Create tables on startup, then insert the seed rows if SEED_DATABASE.
    INIT_DATABASE: bool = _parse_bool_env("INIT_DATABASE", default=True)
    SEED_DATABASE: bool = _parse_bool_env("SEED_DATABASE", default=True)

    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    JSON_SORT_KEYS: bool = False

    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG:   bool = True
    TESTING: bool = False

    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_ECHO: bool = _parse_bool_env("SQLALCHEMY_ECHO", default=False)


class TestingConfig(BaseConfig):

    DEBUG:   bool = True
    TESTING: bool = True

    SQLALCHEMY_DATABASE_URI: str = os.getenv("TEST_DATABASE_URL", "sqlite://")
    SQLALCHEMY_ECHO: bool = False

    JWT_SECRET_KEY: str = "testing-secret-key-with-enough-length-for-hs256"
    JWT_EXPIRATION_MINUTES: int = 5

    BCRYPT_LOG_ROUNDS: int = 4

    # Each test fixture initialises its own in-memory database.
    INIT_DATABASE: bool = False


class ProductionConfig(BaseConfig):

    DEBUG:   bool = False
    TESTING: bool = False
    SQLALCHEMY_ECHO: bool = False

    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL", "")


def validate_production_config(app) -> None:
    """
    Fail-fast guard for production configuration.

    Must be called in the app factory immediately after
    app.config.from_object(ProductionConfig).

    Raises ValueError if any required production value is missing or insecure.
    """
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ValueError(
            "DATABASE_URL environment variable is required in production. "
            "Set it to a valid SQLAlchemy connection string."
        )
    if app.config.get("SECRET_KEY") == "change-me-in-production":
        raise ValueError(
            "SECRET_KEY must be set to a strong random value in production. "
            "Do not use the default placeholder."
        )
    if app.config.get("JWT_SECRET_KEY") == "change-me-in-production":
        raise ValueError(
            "JWT_SECRET_KEY must be set to a strong random value in production. "
            "Do not use the default placeholder."
        )
    if app.config.get("JWT_EXPIRATION_MINUTES", 0) <= 0:
        raise ValueError("JWT_EXPIRATION_MINUTES must be a positive number of minutes.")


# ── Config selector ────────────────────────────────────────────────────────
#
# Used by the app factory:
#   from modshop.config import config_by_name
#   app.config.from_object(config_by_name[flask_env])
# ──────────────────────────────────────────────────────────────────────────

config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
}
