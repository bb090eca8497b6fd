# -*- coding: utf-8 -*-
"""
app/shared/config/settings_base.py

Settings comunes del backend de farmacias (pydantic-settings v2).

Cubre identidad de la app, conexión a PostgreSQL, CORS, métricas HTTP y
logging. Los perfiles por entorno (dev/test/prod) viven en settings_env.py;
Stripe y el ledger de crédito en settings_payments.py.

Esta clase no cachea instancias: el singleton lo resuelve config_loader.

Fecha: 2026-10-17
"""

import logging
from typing import Literal, Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

EnvName = Literal["development", "test", "production"]

_ASYNCPG_SCHEME = "postgresql+asyncpg://"


def normalize_database_url(url: str) -> str:
    """postgres:// y postgresql:// -> postgresql+asyncpg://; sqlite se respeta."""
    if url.startswith("sqlite") or url.startswith(_ASYNCPG_SCHEME):
        return url
    for scheme in ("postgresql://", "postgres://"):
        if url.startswith(scheme):
            return _ASYNCPG_SCHEME + url[len(scheme):]
    return url


class BaseAppSettings(BaseSettings):
    # --- Aplicación ---
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="PharmaDesk", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")

    # --- PostgreSQL (DB_URL tiene prioridad sobre los componentes) ---
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="pharmadesk", validation_alias="DB_NAME")
    db_sslmode: str = Field(default="prefer", validation_alias="DB_SSLMODE")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_connect_timeout_s: float = Field(default=5.0, validation_alias="DB_CONNECT_TIMEOUT_S")
    db_command_timeout_s: float = Field(default=10.0, validation_alias="DB_COMMAND_TIMEOUT_S")

    # --- HTTP ---
    allowed_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
    http_metrics_enabled: bool = Field(default=True, validation_alias="HTTP_METRICS_ENABLED")

    # --- Logging ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "pretty", "plain"] = Field(default="pretty", validation_alias="LOG_FORMAT")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """URL async para SQLAlchemy (asyncpg, o aiosqlite en pruebas)."""
        if self.db_url:
            return normalize_database_url(self.db_url)
        password = quote_plus(self.db_password.get_secret_value())
        return f"{_ASYNCPG_SCHEME}{self.db_user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    def get_cors_origins(self) -> list[str]:
        """CORS_ORIGINS separado por comas (admite comillas); '*' o vacío -> ['*']."""
        raw = (self.allowed_origins or "").strip()
        if not raw or raw == "*":
            return ["*"]
        origins = (item.strip().strip('"').strip("'") for item in raw.split(","))
        return [o for o in origins if o]

    def _security_and_payments_checks(self) -> None:
        """
        Validaciones de arranque.

        En producción exige SSL hacia PostgreSQL y los dos secretos de
        Stripe: sin STRIPE_WEBHOOK_SECRET ningún webhook podría verificarse.
        """
        from .settings_payments import get_payments_settings

        payments = get_payments_settings()

        if self.is_prod:
            if self.db_sslmode != "require":
                raise ValueError("DB_SSLMODE debe ser 'require' en producción")
            if not payments.stripe_secret_key:
                raise ValueError("STRIPE_SECRET_KEY es requerido en producción")
            if not payments.stripe_webhook_secret:
                raise ValueError("STRIPE_WEBHOOK_SECRET es requerido en producción")
            return

        if not payments.stripe_secret_key:
            logger.info("STRIPE_SECRET_KEY vacío: create-payment-intent responderá con error de gateway")
        if not payments.stripe_webhook_secret:
            logger.info("STRIPE_WEBHOOK_SECRET vacío: los webhooks se rechazarán con 400")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["BaseAppSettings", "EnvName", "normalize_database_url"]

# Fin del archivo app/shared/config/settings_base.py
