from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, PositiveFloat, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_APP_URL = "http://web.localhost"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_HTTP_URL = TypeAdapter(HttpUrl)


class Settings(BaseSettings):
    app_url: str = Field(
        default=DEFAULT_APP_URL,
        validation_alias=AliasChoices("APP_URL", "STACKINIT_APP_URL"),
    )
    compose_command: list[str] = ["docker", "compose"]
    marker_file: str = "docker-compose.yml"

    db_service: str = "db"
    web_service: str = "web"
    exec_user: str = "www-data"
    container_app_dir: str = "/var/www/html/laravel"
    host_app_dir: str = "laravel"

    env_file: str = ".env"
    env_template: str = ".env.example"

    db_host: str = "db"
    db_user: str = "root"
    db_password: str = "rootpass"
    db_wait_timeout: PositiveFloat = 60
    db_wait_interval: PositiveFloat = 2

    admin_path: str = "/admin"
    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="STACKINIT_",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("APP_URL cannot be empty")
        if any(ch.isspace() or not ch.isprintable() for ch in value):
            raise ValueError("APP_URL cannot contain whitespace or control characters")
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError(f"APP_URL is not a valid http(s) URL: {value!r}") from exc
        return value.rstrip("/")

    @field_validator("compose_command")
    @classmethod
    def require_compose_command(cls, value: list[str]) -> list[str]:
        if not value or not all(part.strip() for part in value):
            raise ValueError("compose_command must name an executable")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def admin_url(self) -> str:
        return f"{self.app_url}{self.admin_path}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
