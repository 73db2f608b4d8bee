from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class Mode(Enum):
    DEV = "development"
    PRODUCTION = "production"


def parse_mode(value: str | None) -> Mode:
    if value is not None and value.strip().lower() == Mode.DEV.value:
        return Mode.DEV
    return Mode.PRODUCTION


class ServerConfig(BaseSettings):
    """Process-wide serving configuration.

    Built once at startup and passed into ``create_app``. Environment
    variable names map to field names in uppercase, e.g. ``PORT``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    node_env: str = Field(default="production")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)
    output_dir: Path = Field(default=Path("dist/public"))
    entry_document: str = Field(default="index.html", min_length=1)
    not_found_document: str = Field(default="404.html", min_length=1)
    api_prefix: str = Field(default="/api/")
    build_command: str = Field(default="npm run build", min_length=1)
    dev_server_url: str = Field(default="http://localhost:5173")
    log_level: Literal["critical", "error", "warning", "info", "debug"] = Field(default="info")

    @field_validator("log_level", mode="before")
    @classmethod
    def _lowercase_log_level(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("output_dir")
    @classmethod
    def _resolve_output_dir(cls, value: Path) -> Path:
        return value.resolve()

    @field_validator("api_prefix")
    @classmethod
    def _normalize_api_prefix(cls, value: str) -> str:
        stripped = value.strip().strip("/")
        if not stripped:
            raise ValueError("api_prefix must not be blank")
        return f"/{stripped}/"

    @field_validator("dev_server_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def mode(self) -> Mode:
        return parse_mode(self.node_env)


def load_config() -> ServerConfig:
    try:
        return ServerConfig()
    except ValidationError as error:
        raise ConfigError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
