import os
from dataclasses import dataclass, field
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

VERSION = "1.0.0"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [item for item in value.split() if item]


@dataclass(frozen=True)
class Settings:
    """Application configuration, built once at startup and passed around explicitly."""

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    environment: str = "development"  # development | staging | production

    # Database Configuration
    database_url: str = "sqlite:///./greenlight.db"
    db_max_open_conns: int = 25
    db_max_idle_conns: int = 25
    db_max_idle_time: int = 900  # seconds
    db_query_timeout: float = 3.0  # seconds, per storage operation

    # Rate limiter (per client IP, token bucket)
    limiter_rps: float = 2.0
    limiter_burst: int = 4
    limiter_enabled: bool = True

    # CORS
    cors_trusted_origins: list[str] = field(default_factory=list)

    # SMTP Configuration
    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_sender: str = "Greenlight <no-reply@greenlight.local>"

    # Token lifetimes
    activation_token_ttl: timedelta = timedelta(days=3)
    authentication_token_ttl: timedelta = timedelta(hours=24)

    # Background tasks
    background_workers: int = 4
    shutdown_timeout: float = 30.0  # seconds to wait for outstanding tasks

    # Optional bootstrap admin
    admin_email: str | None = None
    admin_password: str | None = None

    # bcrypt work factor
    bcrypt_cost: int = 12

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and .env, loaded at import)."""
        return cls(
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", 4000)),
            environment=os.getenv("ENVIRONMENT", "development"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./greenlight.db"),
            db_max_open_conns=int(os.getenv("DB_MAX_OPEN_CONNS", 25)),
            db_max_idle_conns=int(os.getenv("DB_MAX_IDLE_CONNS", 25)),
            db_max_idle_time=int(os.getenv("DB_MAX_IDLE_TIME", 900)),
            db_query_timeout=float(os.getenv("DB_QUERY_TIMEOUT", 3)),
            limiter_rps=float(os.getenv("LIMITER_RPS", 2)),
            limiter_burst=int(os.getenv("LIMITER_BURST", 4)),
            limiter_enabled=_env_bool("LIMITER_ENABLED", True),
            cors_trusted_origins=_env_list("CORS_TRUSTED_ORIGINS"),
            smtp_host=os.getenv("SMTP_HOST", "localhost"),
            smtp_port=int(os.getenv("SMTP_PORT", 25)),
            smtp_username=os.getenv("SMTP_USERNAME", ""),
            smtp_password=os.getenv("SMTP_PASSWORD", ""),
            smtp_sender=os.getenv("SMTP_SENDER", "Greenlight <no-reply@greenlight.local>"),
            activation_token_ttl=timedelta(seconds=int(os.getenv("ACTIVATION_TOKEN_TTL", 3 * 24 * 3600))),
            authentication_token_ttl=timedelta(seconds=int(os.getenv("AUTHENTICATION_TOKEN_TTL", 24 * 3600))),
            background_workers=int(os.getenv("BACKGROUND_WORKERS", 4)),
            shutdown_timeout=float(os.getenv("SHUTDOWN_TIMEOUT", 30)),
            admin_email=os.getenv("ADMIN_EMAIL") or None,
            admin_password=os.getenv("ADMIN_PASSWORD") or None,
            bcrypt_cost=int(os.getenv("BCRYPT_COST", 12)),
        )
