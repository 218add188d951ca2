import logging
import os
import secrets
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./kanban.db"
# names understood by both logging and uvicorn
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(RuntimeError):
    """Raised when the process must not start with the given environment."""


@dataclass(frozen=True)
class Settings:
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: float = 24 * 60
    database_url: str = DEFAULT_DATABASE_URL
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    frontend_url: str = "*"


def _first(environ: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _normalize_database_url(url: str) -> str:
    # SQLAlchemy only accepts the "postgresql" dialect name
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build the process-wide settings from environment variables.

    In production a signing secret is mandatory. Elsewhere a random secret is
    generated for the lifetime of the process, so tokens do not survive a
    restart.
    """
    if environ is None:
        environ = os.environ

    environment = (_first(environ, "ENVIRONMENT", "APP_ENV") or "development").lower()
    secret_key = _first(environ, "SECRET_KEY", "JWT_SECRET")
    if secret_key is None:
        if environment == "production":
            raise ConfigError("SECRET_KEY must be set in production")
        logger.warning("SECRET_KEY is not set; using an ephemeral secret for this process")
        secret_key = secrets.token_urlsafe(32)

    try:
        expire_minutes = float(_first(environ, "ACCESS_TOKEN_EXPIRE_MINUTES") or 24 * 60)
        port = int(_first(environ, "PORT") or 3000)
    except ValueError as exc:
        raise ConfigError(f"invalid numeric setting: {exc}") from exc

    log_level = (_first(environ, "LOG_LEVEL") or "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"invalid LOG_LEVEL {log_level!r}, expected one of {', '.join(LOG_LEVELS)}")

    return Settings(
        secret_key=secret_key,
        algorithm=_first(environ, "ALGORITHM") or "HS256",
        access_token_expire_minutes=expire_minutes,
        database_url=_normalize_database_url(_first(environ, "DATABASE_URL") or DEFAULT_DATABASE_URL),
        environment=environment,
        log_level=log_level,
        host=_first(environ, "HOST") or "0.0.0.0",
        port=port,
        frontend_url=_first(environ, "FRONTEND_URL") or "*",
    )
