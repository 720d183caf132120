"""Container Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - DATABASE_URL is optional; absence is logged, never fatal at load time
    - get_settings() is cached (lru_cache), single instance per process
    - Rendered configs (nginx, php ini) and the orchestrator read the same fields

Design Decisions:
    - Defaults mirror the Render.com deployment (port 10000, /app, php-fpm on 9000)
    - List fields accept comma-separated env values (WRITABLE_SUBDIRS=cache,log)
    - DOCUMENT_ROOT follows APP_DIR unless set explicitly
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Container settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: str | None = None
    health_check_mode: Literal["database", "console"] = "database"

    # Symfony runtime
    app_env: str = "prod"
    app_debug: bool = False
    app_dir: Path = Path("/app")
    php_binary: str = "php"
    console_path: str = "bin/console"

    # Readiness wait
    warmup_seconds: float = 5.0
    poll_interval_seconds: float = 2.0
    max_attempts: int = 30

    # Writable directories (relative to app_dir)
    writable_root: str = "var"
    writable_subdirs: Annotated[list[str], NoDecode] = ["cache", "log"]

    # Reverse proxy
    listen_port: int = 10000
    # Defaults to <app_dir>/public
    document_root: Path | None = None
    fpm_address: str = "127.0.0.1:9000"
    client_max_body_size: str = "50M"

    # PHP runtime
    memory_limit: str = "512M"
    max_execution_time: int = 300
    timezone: str = "Europe/Paris"

    # Supervisor
    supervisord_conf: Path = Path("/etc/supervisor/conf.d/supervisord.conf")

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("app_debug", mode="before")
    @classmethod
    def parse_app_debug(cls, v):
        """Symfony uses APP_DEBUG=0/1; accept empty string as off."""
        if isinstance(v, str) and v.strip() == "":
            return False
        return v

    @field_validator("database_url", mode="before")
    @classmethod
    def blank_database_url(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("writable_subdirs", mode="before")
    @classmethod
    def split_subdirs(cls, v):
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("max_attempts")
    @classmethod
    def positive_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_attempts must be at least 1")
        return v

    @model_validator(mode="after")
    def default_document_root(self) -> "Settings":
        if self.document_root is None:
            self.document_root = self.app_dir / "public"
        return self

    @property
    def console_command(self) -> tuple[str, ...]:
        """argv prefix for `php bin/console`."""
        return (self.php_binary, self.console_path)

    @property
    def default_command(self) -> list[str]:
        """Command handed off to when none is given on the command line."""
        return ["/usr/bin/supervisord", "-c", str(self.supervisord_conf)]


@lru_cache
def get_settings() -> Settings:
    return Settings()
