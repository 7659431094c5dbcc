# tests/test_sanitize_amount.py

import re

import pytest

from app.core.upi import sanitize_amount, format_amount

VALID_SHAPE = re.compile(r"^\d*(\.\d{0,2})?$")

MESSY_INPUTS = [
    "",
    "abc",
    ".",
    "..",
    "0",
    "00",
    "007",
    "007.1",
    "0.5",
    ".5",
    "5.",
    "12.3456",
    "1.2.3",
    "1.234.5",
    "₹1,250.50",
    " 99 ",
    "-42.1",
    "1e5",
    "٣٤",
    "0000.000",
]


class TestSanitizeAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", ""),
            ("007.1", "7.1"),
            ("0.5", "0.5"),
            ("12.3456", "12.34"),
            ("1.2.3", "1.2"),
            ("007", "7"),
            ("00", "0"),
            ("000.5", "0.5"),
            ("₹1,250.50", "1250.50"),
            ("abc", ""),
            ("-42.1", "42.1"),
        ],
    )
    def test_known_values(self, raw, expected):
        assert sanitize_amount(raw) == expected

    def test_extra_dots_still_truncate_fraction(self):
        assert sanitize_amount("1.234.5") == "1.23"

    @pytest.mark.parametrize("raw", MESSY_INPUTS)
    def test_output_is_always_a_decimal_shape(self, raw):
        out = sanitize_amount(raw)
        assert VALID_SHAPE.match(out), out
        assert out.count(".") <= 1

    def test_none_is_empty(self):
        assert sanitize_amount(None) == ""

    def test_keeps_zero_before_point(self):
        assert sanitize_amount("0.05") == "0.05"


class TestFormatAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("50", "50.00"),
            ("125.5", "125.50"),
            ("0.5", "0.50"),
            (".5", "0.50"),
            ("5.", "5.00"),
            ("12.3456", "12.34"),
            ("₹ 1,000", "1000.00"),
        ],
    )
    def test_positive_amounts(self, raw, expected):
        assert format_amount(raw) == expected

    @pytest.mark.parametrize(
        "raw", [None, "", "  ", "0", "0.00", "000", ".", "abc", "-5", " -0.5", "₹-5", "INR -5", "Rs -5", "Rs. -.5"]
    )
    def test_dropped_amounts(self, raw):
        assert format_amount(raw) is None

    def test_huge_amount_does_not_raise(self):
        assert format_amount("9" * 40) is None

    @pytest.mark.parametrize("raw, expected", [("₹5-", "5.00"), ("Rs 5", "5.00")])
    def test_hyphen_after_first_digit_is_not_a_sign(self, raw, expected):
        assert format_amount(raw) == expected
