# -*- coding: utf-8 -*-
"""
app/shared/config/settings_payments.py

Configuración de pagos y del ledger de crédito.

Descripción:
    Centraliza las claves de Stripe, la tolerancia de firma de webhooks,
    los timeouts hacia el gateway y los reintentos del ledger.

Fecha: 2026-10-17
"""

from __future__ import annotations

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentsSettings(BaseSettings):
    """Configuración de sistema de pagos."""

    # =========================================================================
    # STRIPE
    # =========================================================================

    stripe_secret_key: Optional[str] = Field(
        default=None,
        validation_alias="STRIPE_SECRET_KEY",
        description="Stripe secret key (sk_live_... o sk_test_...)",
    )

    stripe_webhook_secret: Optional[str] = Field(
        default=None,
        validation_alias="STRIPE_WEBHOOK_SECRET",
        description="Stripe webhook signing secret (whsec_...)",
    )

    stripe_webhook_tolerance_seconds: int = Field(
        default=300,
        validation_alias="STRIPE_WEBHOOK_TOLERANCE_SECONDS",
        description="Tolerancia para validación de timestamp de webhooks Stripe (5 minutos)",
    )

    # =========================================================================
    # TIMEOUTS Y RECONCILIACIÓN
    # =========================================================================

    gateway_timeout_seconds: float = Field(
        default=15.0,
        validation_alias="PAYMENTS_GATEWAY_TIMEOUT_SECONDS",
        description="Tiempo máximo por llamada al gateway de pagos",
    )

    reconcile_with_live_intent: bool = Field(
        default=True,
        validation_alias="PAYMENTS_RECONCILE_WITH_LIVE_INTENT",
        description="En webhooks, consulta el intent vivo en el gateway en lugar de confiar en el payload",
    )

    default_currency: str = Field(
        default="usd",
        validation_alias="PAYMENTS_DEFAULT_CURRENCY",
        description="Moneda usada cuando el tenant no tiene configuración propia",
    )

    # =========================================================================
    # LEDGER DE CRÉDITO
    # =========================================================================

    ledger_max_apply_attempts: int = Field(
        default=3,
        ge=1,
        validation_alias="LEDGER_MAX_APPLY_ATTEMPTS",
        description="Reintentos de la unidad de trabajo cuando se pierde el compare-and-set del saldo",
    )

    @field_validator("default_currency", mode="before")
    @classmethod
    def _normalize_currency(cls, v: Optional[str]) -> str:
        """Normaliza la moneda a código ISO en minúsculas."""
        return (v or "usd").strip().lower()

    # =========================================================================
    # CONFIGURACIÓN DE PYDANTIC
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_payments_settings: Optional[PaymentsSettings] = None


def get_payments_settings() -> PaymentsSettings:
    """
    Obtiene la instancia global de configuración de pagos.

    Returns:
        PaymentsSettings: Configuración de pagos
    """
    global _payments_settings
    if _payments_settings is None:
        _payments_settings = PaymentsSettings()
    return _payments_settings


def reset_payments_settings() -> None:
    """Descarta el singleton (útil en tests que cambian variables de entorno)."""
    global _payments_settings
    _payments_settings = None


__all__ = [
    "PaymentsSettings",
    "get_payments_settings",
    "reset_payments_settings",
]
# Fin del archivo app/shared/config/settings_payments.py
