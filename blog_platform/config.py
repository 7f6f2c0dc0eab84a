import os
from dataclasses import dataclass, field
from typing import Optional

# Optional: load a local .env file if present.
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    # If python-dotenv isn't installed or .env isn't present, that's fine.
    pass


# Only ever used when AUTH_ALLOW_DEV_SECRET=1.
DEV_JWT_SECRET = "dev_change_me"


class ConfigError(RuntimeError):
    pass


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Returns:
      - True/False if the env var is set to a recognizable value
      - default if unset or unrecognized

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env(name: str, default: Optional[str] = None):
    return field(default_factory=lambda: os.environ.get(name, default))


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Values are read from the environment when the Config is constructed, so
    tests can build one with explicit keyword arguments instead.
    """

    # -----------------
    # Storage
    # -----------------
    # SQLite file path (default) or a postgres:// URL.
    DB_DSN: str = field(
        default_factory=lambda: (
            os.environ.get("BLOG_DATABASE_URL")
            or os.environ.get("DATABASE_URL")
            or "./blog_platform.sqlite"
        )
    )

    # sql | memory
    STORE_BACKEND: str = _env("BLOG_STORE", "sql")

    # -----------------
    # Auth (JWT)
    # -----------------
    AUTH_JWT_SECRET: str | None = _env("AUTH_JWT_SECRET")
    AUTH_ALLOW_DEV_SECRET: bool = field(
        default_factory=lambda: _env_bool("AUTH_ALLOW_DEV_SECRET", False) is True
    )
    AUTH_TOKEN_EXPIRE_MINUTES: int = field(
        default_factory=lambda: int(os.environ.get("AUTH_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days
    )

    # The source app documented category writes as admin-only but never checked
    # the role. Off keeps that behaviour; on requires role=admin.
    CATEGORY_ADMIN_ONLY: bool = field(
        default_factory=lambda: _env_bool("CATEGORY_ADMIN_ONLY", False) is True
    )

    # Bootstrap first admin user if the users table is empty.
    # Nothing is created unless both email and password are set.
    AUTH_BOOTSTRAP_ADMIN_EMAIL: str | None = _env("AUTH_BOOTSTRAP_ADMIN_EMAIL")
    AUTH_BOOTSTRAP_ADMIN_PASSWORD: str | None = _env("AUTH_BOOTSTRAP_ADMIN_PASSWORD")
    AUTH_BOOTSTRAP_ADMIN_NAME: str = _env("AUTH_BOOTSTRAP_ADMIN_NAME", "Admin")

    # -----------------
    # HTTP
    # -----------------
    API_PREFIX: str = _env("API_PREFIX", "/api")

    # Vite on :5173 / CRA on :3000 during development.
    CORS_ALLOW_ORIGINS: str = _env(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:5173,http://localhost:3000",
    )

    @property
    def jwt_secret(self) -> str:
        """The signing secret, falling back to the dev secret only when allowed."""
        if self.AUTH_JWT_SECRET:
            return self.AUTH_JWT_SECRET
        if self.AUTH_ALLOW_DEV_SECRET:
            return DEV_JWT_SECRET
        raise ConfigError("AUTH_JWT_SECRET is not set")


def check_config(cfg: Config) -> Config:
    if not cfg.AUTH_JWT_SECRET and not cfg.AUTH_ALLOW_DEV_SECRET:
        raise ConfigError(
            "AUTH_JWT_SECRET is not set. Set it to a strong random value "
            "(or AUTH_ALLOW_DEV_SECRET=1 for local development)."
        )
    if cfg.STORE_BACKEND not in ("sql", "memory"):
        raise ConfigError(f"unknown BLOG_STORE backend: {cfg.STORE_BACKEND!r}")
    if int(cfg.AUTH_TOKEN_EXPIRE_MINUTES) < 1:
        raise ConfigError("AUTH_TOKEN_EXPIRE_MINUTES must be positive")
    return cfg


def load_config() -> Config:
    """Read configuration from the environment and refuse to run without a JWT secret."""
    return check_config(Config())
