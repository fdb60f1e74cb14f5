"""Configuration management."""

from __future__ import annotations
import os

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime settings, read from the environment by load_settings()."""

    env: str = "development"
    log_level: str = "INFO"
    strict: bool = True
    seed: int | None = None
    session_max_age: int = 3600
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def _flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from ``SOLIART_*`` variables (and ``ALLOWED_ORIGINS``).

    Args:
        environ: Mapping to read instead of os.environ.

    Returns:
        Settings object.
    """
    environ = os.environ if environ is None else environ

    env = environ.get("SOLIART_ENV", "development")
    strict = environ.get("SOLIART_STRICT")
    seed = environ.get("SOLIART_SEED")

    return Settings(
        env=env,
        log_level=environ.get("SOLIART_LOG_LEVEL", "INFO"),
        strict=_flag(strict) if strict is not None else env != "production",
        seed=int(seed) if seed else None,
        session_max_age=int(environ.get("SOLIART_SESSION_MAX_AGE", "3600")),
        allowed_origins=environ.get("ALLOWED_ORIGINS", "*").split(","),
    )
