"""
Tests for Indian-numbering amount in words.
"""

import pytest
from hypothesis import given, strategies as st

from utils.amount_words import amount_in_words, two_digit_words


class TestAmountInWords:
    """Tests for amount_in_words."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "Zero Only"),
            (7, "Seven Only"),
            (19, "Nineteen Only"),
            (40, "Forty Only"),
            (100, "One Hundred Only"),
            (105, "One Hundred and Five Only"),
            (1000, "One Thousand Only"),
            (59000, "Fifty Nine Thousand Only"),
            (118000, "One Lakh Eighteen Thousand Only"),
            (176930, "One Lakh Seventy Six Thousand Nine Hundred and Thirty Only"),
            (1234567, "Twelve Lakh Thirty Four Thousand Five Hundred and Sixty Seven Only"),
            (10000000, "One Crore Only"),
            (987654321, "Ninety Eight Crore Seventy Six Lakh Fifty Four Thousand Three Hundred and Twenty One Only"),
        ],
    )
    def test_known_amounts(self, amount, expected):
        assert amount_in_words(amount) == expected

    def test_more_than_ninety_nine_crore(self):
        assert amount_in_words(1_500_000_000) == "One Hundred and Fifty Crore Only"

    def test_negative_amounts_prefixed_with_minus(self):
        assert amount_in_words(-1) == "Minus One Only"
        assert amount_in_words(-118000) == "Minus One Lakh Eighteen Thousand Only"

    def test_two_digit_words(self):
        assert two_digit_words(0) == ""
        assert two_digit_words(21) == "Twenty One"
        assert two_digit_words(90) == "Ninety"


class TestAmountInWordsProperties:
    """Property tests for amount_in_words."""

    @given(amount=st.integers(min_value=1, max_value=999_999_999))
    def test_and_marks_trailing_tens_and_units(self, amount):
        """
        **Property: "and" precedes a non-zero remainder below 100**

        Below 100 crore, "and" appears exactly when the amount has a
        higher group and a non-zero last two digits.
        """
        words = amount_in_words(amount).split()

        assert words[-1] == "Only"
        assert words.count("and") == (1 if amount >= 100 and amount % 100 else 0)
