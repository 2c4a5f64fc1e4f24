"""
Unit Tests for utility helpers.

Test Coverage:
- spelled-out currency amounts
- money display formatting
- surface area to quantity conversion
- sales tax lookup
"""

import pytest

from jamb_estimate.services.tax_rates import lookup_tax_rate
from jamb_estimate.utils.currency_words import amount_to_words, integer_to_words
from jamb_estimate.utils.formatting import (
    format_compact,
    format_currency,
    format_signed_currency,
    format_whole,
)
from jamb_estimate.utils.surface import square_feet, surface_quantity


# =============================================================================
# Currency words
# =============================================================================


class TestCurrencyWords:
    """Tests for amount_to_words."""

    def test_zero(self):
        assert amount_to_words(0) == "zero and 00/100 dollars"

    def test_thousands_with_cents(self):
        words = amount_to_words(1234.56)
        assert words == "one thousand two hundred thirty-four and 56/100 dollars"
        assert "thousand" in words
        assert words.endswith("56/100 dollars")

    def test_cents_round_half_cent_float_noise(self):
        assert amount_to_words(167.5) == "one hundred sixty-seven and 50/100 dollars"
        assert amount_to_words(0.1 + 0.2) == "zero and 30/100 dollars"

    def test_large_amounts(self):
        assert integer_to_words(2_000_015) == "two million fifteen"
        assert integer_to_words(1_000_000_000) == "one billion"

    def test_teens_and_tens(self):
        assert integer_to_words(13) == "thirteen"
        assert integer_to_words(40) == "forty"
        assert integer_to_words(101) == "one hundred one"

    def test_negative_amount(self):
        assert amount_to_words(-20) == "minus twenty and 00/100 dollars"


# =============================================================================
# Formatting
# =============================================================================


class TestFormatting:
    """Tests for display formatting."""

    def test_format_currency(self):
        assert format_currency(1234.5) == "1,234.50"
        assert format_currency(0) == "0.00"

    def test_format_whole(self):
        assert format_whole(1234.56) == "1,235"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1_550_000, "1.55M"),
            (150_400, "150K"),
            (1_340, "1.34K"),
            (999, "999.00"),
        ],
    )
    def test_format_compact(self, value, expected):
        assert format_compact(value) == expected

    def test_format_signed_currency(self):
        assert format_signed_currency(12) == "+$12.00"
        assert format_signed_currency(-1200.5) == "-$1,200.50"


# =============================================================================
# Surface
# =============================================================================


class TestSurface:
    """Tests for area-based quantities."""

    def test_feet(self):
        assert square_feet(10, 12) == 120

    def test_meters(self):
        assert square_feet(2, 5, system="m") == pytest.approx(107.639)

    def test_known_square_meters_win(self):
        assert surface_quantity(10, 10, known_square_meters=10) == 108

    def test_never_below_one(self):
        assert surface_quantity(0, 0) == 1


# =============================================================================
# Tax rates
# =============================================================================


class TestTaxRates:
    """Tests for lookup_tax_rate."""

    @pytest.mark.parametrize(
        "jurisdiction,expected",
        [
            ("CA", 8.85),
            ("ca", 8.85),
            ("California", 8.85),
            (" new york ", 8.53),
            ("DE", 0.0),
            ("ON", 13.0),
            ("Ontario", 13.0),
        ],
    )
    def test_known_jurisdictions(self, jurisdiction, expected):
        assert lookup_tax_rate(jurisdiction) == expected

    @pytest.mark.parametrize("jurisdiction", ["ZZ", "", None, "Atlantis"])
    def test_unknown_jurisdictions_are_zero(self, jurisdiction):
        assert lookup_tax_rate(jurisdiction) == 0.0
