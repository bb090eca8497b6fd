# -*- coding: utf-8 -*-
"""
app/shared/utils/money.py

Aritmética monetaria con Decimal (nunca float).

- to_money: normaliza a 2 decimales (ROUND_HALF_UP).
- to_minor_units: convierte a centavos enteros para el gateway.
- fee_from_bps: comisión de plataforma en centavos a partir de basis points.

Fecha: 2026-10-17
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from app.shared.errors import InvalidInputError

TWO_PLACES = Decimal("0.01")

# Tope de las columnas NUMERIC(10,2)
MAX_AMOUNT = Decimal("99999999.99")

MoneyLike = Union[Decimal, int, str]


def to_money(value: MoneyLike, field: str = "amount") -> Decimal:
    """
    Convierte a Decimal con 2 decimales.

    Rechaza valores no finitos y los que no caben en NUMERIC(10,2).
    """
    if isinstance(value, float):
        # Un float ya perdió precisión; se exige str/Decimal
        value = str(value)
    try:
        dec = Decimal(value)
        if not dec.is_finite():
            raise InvalidOperation
        money = dec.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(field, f"Monto inválido para '{field}': {value!r}")
    if abs(money) > MAX_AMOUNT:
        raise InvalidInputError(field, f"Monto fuera de rango para '{field}': {value!r}")
    return money


def to_minor_units(amount: Decimal) -> int:
    """Decimal en unidades mayores → entero en centavos."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(TWO_PLACES)


def fee_from_bps(amount_cents: int, bps: int) -> int:
    """Comisión en centavos: amount_cents * bps / 10000, redondeo half-up."""
    if bps <= 0:
        return 0
    fee = (Decimal(amount_cents) * Decimal(bps) / Decimal(10000)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(fee)


__all__ = ["TWO_PLACES", "MAX_AMOUNT", "to_money", "to_minor_units", "from_minor_units", "fee_from_bps"]

# Fin del archivo app/shared/utils/money.py
