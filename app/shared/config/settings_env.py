# -*- coding: utf-8 -*-
"""
app/shared/config/settings_env.py

Perfiles de configuración por entorno (PYTHON_ENV).

- development: logs DEBUG legibles, PostgreSQL local sin SSL
- test:        SQLite en memoria salvo DB_URL, logs WARNING
- production:  logs JSON, SSL obligatorio, sin lectura de .env

`python_env` queda fijo en cada perfil (PYTHON_ENV solo elige el perfil en
config_loader, no se vuelve a validar aquí); el resto de campos sigue
aceptando su variable de entorno y también el nombre del campo al construir.

Fecha: 2026-10-17
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings, EnvName

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "pretty", "plain"]


class _ProfileSettings(BaseAppSettings):
    @field_validator("python_env", mode="before")
    @classmethod
    def _fixed_profile_env(cls, value):
        return cls.model_fields["python_env"].default


class DevSettings(_ProfileSettings):
    python_env: EnvName = "development"

    log_level: LogLevel = Field(default="DEBUG", validation_alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="pretty", validation_alias="LOG_FORMAT")
    db_sslmode: str = Field(default="disable", validation_alias="DB_SSLMODE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


class EnvTestingSettings(_ProfileSettings):
    python_env: EnvName = "test"

    log_level: LogLevel = Field(default="WARNING", validation_alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="plain", validation_alias="LOG_FORMAT")
    db_url: Optional[str] = Field(default="sqlite+aiosqlite:///:memory:", validation_alias="DB_URL")
    db_connect_timeout_s: float = Field(default=2.0, validation_alias="DB_CONNECT_TIMEOUT_S")

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


class ProdSettings(_ProfileSettings):
    python_env: EnvName = "production"

    log_level: LogLevel = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="json", validation_alias="LOG_FORMAT")
    db_sslmode: str = Field(default="require", validation_alias="DB_SSLMODE")

    # Secretos solo desde el entorno / secret store
    model_config = SettingsConfigDict(
        env_file=None,
        populate_by_name=True,
        extra="ignore",
    )


SETTINGS_BY_ENV: dict[str, type[BaseAppSettings]] = {
    "development": DevSettings,
    "test": EnvTestingSettings,
    "production": ProdSettings,
}


__all__ = ["DevSettings", "EnvTestingSettings", "ProdSettings", "SETTINGS_BY_ENV"]

# Fin del archivo app/shared/config/settings_env.py
