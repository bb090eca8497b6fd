# -*- coding: utf-8 -*-
"""
tests/shared/test_money.py

Tests de aritmética monetaria (Decimal, centavos, basis points).

Fecha: 2026-10-17
"""

from decimal import Decimal

import pytest

from app.shared.errors import ErrorKind, InvalidInputError
from app.shared.utils.money import MAX_AMOUNT, fee_from_bps, from_minor_units, to_minor_units, to_money


class TestToMoney:
    def test_normalizes_to_two_places(self):
        assert to_money("85.5") == Decimal("85.50")
        assert to_money(100) == Decimal("100.00")

    def test_rounds_half_up(self):
        assert to_money("0.005") == Decimal("0.01")
        assert to_money("2.675") == Decimal("2.68")

    def test_float_goes_through_str(self):
        """0.1 + 0.2 como float no debe arrastrar el error binario."""
        assert to_money(0.1) + to_money(0.2) == Decimal("0.30")

    @pytest.mark.parametrize("raw", ["abc", "", "NaN", "Infinity", None])
    def test_rejects_invalid_values(self, raw):
        with pytest.raises(InvalidInputError) as exc_info:
            to_money(raw, "limit")
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.field == "limit"

    @pytest.mark.parametrize("raw", ["1e30", "100000000.00", "-100000000", Decimal("9" * 40)])
    def test_rejects_values_beyond_column_precision(self, raw):
        with pytest.raises(InvalidInputError) as exc_info:
            to_money(raw, "amount")
        assert exc_info.value.field == "amount"

    def test_column_maximum_is_accepted(self):
        assert to_money("99999999.99") == MAX_AMOUNT


class TestMinorUnits:
    def test_to_minor_units(self):
        assert to_minor_units(Decimal("50.00")) == 5000
        assert to_minor_units(Decimal("19.99")) == 1999

    def test_from_minor_units(self):
        assert from_minor_units(1999) == Decimal("19.99")


class TestFeeFromBps:
    def test_zero_or_negative_bps_means_no_fee(self):
        assert fee_from_bps(5000, 0) == 0
        assert fee_from_bps(5000, -10) == 0

    def test_fee_rounds_half_up(self):
        # 2.5% de 50.00 = 125 centavos
        assert fee_from_bps(5000, 250) == 125
        # 1.5% de 0.33 = 0.495 centavos -> 0
        assert fee_from_bps(33, 150) == 0
        # 1.5% de 1.00 = 1.5 centavos -> 2
        assert fee_from_bps(100, 150) == 2

# Fin del archivo tests/shared/test_money.py
