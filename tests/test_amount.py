import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import Amount, AmountOverflowError, AmountUnderflowError, MAX_UNITS


class TestAmount:
    def test_parse_scales_to_sub_units(self):
        assert Amount.parse("1.2345").units == 12345
        assert Amount.parse(" 2 ").units == 20000
        assert Amount.parse("0.0001").units == 1

    def test_parse_rejects_more_than_four_places(self):
        with pytest.raises(ValueError):
            Amount.parse("1.23456")

    def test_parse_accepts_trailing_zeros_beyond_four_places(self):
        assert Amount.parse("1.500000") == Amount.parse("1.5")

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            Amount.parse("abc")

    def test_parse_rejects_negative(self):
        with pytest.raises(ValueError):
            Amount.parse("-1.0")

    def test_parse_rejects_non_finite(self):
        with pytest.raises(ValueError):
            Amount.parse("NaN")
        with pytest.raises(ValueError):
            Amount.parse("Infinity")

    def test_from_decimal_and_back(self):
        amount = Amount.from_decimal(Decimal("100.5"))
        assert amount.to_decimal() == Decimal("100.5")

    def test_str_has_four_places(self):
        assert str(Amount.parse("1.5")) == "1.5000"
        assert str(Amount.ZERO) == "0.0000"
        assert str(Amount(1)) == "0.0001"

    def test_checked_add(self):
        assert Amount.parse("1.5").checked_add(Amount.parse("2.25")) == Amount.parse("3.75")

    def test_checked_add_overflow(self):
        with pytest.raises(AmountOverflowError):
            Amount(MAX_UNITS).checked_add(Amount(1))

    def test_checked_add_at_ceiling(self):
        assert Amount(MAX_UNITS - 1).checked_add(Amount(1)).units == MAX_UNITS

    def test_checked_sub(self):
        assert Amount.parse("10").checked_sub(Amount.parse("2.5")) == Amount.parse("7.5")

    def test_checked_sub_underflow(self):
        with pytest.raises(AmountUnderflowError):
            Amount.parse("1").checked_sub(Amount.parse("1.0001"))

    def test_ordering(self):
        assert Amount.parse("1") < Amount.parse("2")
        assert Amount.parse("2") >= Amount.parse("2.0")
        assert Amount.parse("3") > Amount.ZERO

    def test_negative_units_rejected(self):
        with pytest.raises(ValueError):
            Amount(-1)

    def test_float_units_rejected(self):
        with pytest.raises(TypeError):
            Amount(1.5)

    def test_parse_rejects_amount_above_ceiling(self):
        ceiling = Amount(MAX_UNITS).to_decimal()
        assert Amount.from_decimal(ceiling).units == MAX_UNITS
        with pytest.raises(ValueError):
            Amount.from_decimal(ceiling + Decimal("0.0001"))
