r"""Process-wide tunables read from the environment.

Settings are loaded once, when ``Settings()`` is constructed, from
environment variables and an optional ``.env`` file. Invalid values
raise ``pydantic.ValidationError`` at that point, so a misconfigured
process fails at startup rather than on its first request.
"""

from __future__ import annotations

__all__ = ["Settings"]

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from areliable.core.config import DEFAULT_TIMEOUT


class Settings(BaseSettings):
    """Read-only settings shared by clients, retry executors and caches.

    Example:
        ```pycon
        >>> from areliable.settings import Settings
        >>> settings = Settings(https_default_timeout=5.0)
        >>> settings.https_default_timeout
        5.0

        ```
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # ===== HTTPS =====
    https_default_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    # ===== Logging =====
    log_level: str = "INFO"
    log_json: bool = False

    # ===== Redis =====
    # Cache is disabled when no host is configured
    redis_host: str | None = None
    redis_port: int = 6379
    redis_password: str | None = None
    redis_default_expiration: float = Field(default=24 * 60 * 60, gt=0)

    @model_validator(mode="after")
    def _check_redis(self) -> Settings:
        if self.redis_host and self.redis_port <= 0:
            msg = f"redis_port must be > 0 when redis_host is set, got {self.redis_port}"
            raise ValueError(msg)
        return self
