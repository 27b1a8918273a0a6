"""
Render rupee amounts in words using the Indian numbering convention.

Digits are grouped from the right as 2-2-2-1-2 (crore, lakh, thousand,
hundred, tens-units), e.g. 12,34,567 is "Twelve Lakh Thirty Four Thousand
Five Hundred and Sixty Seven Only".
"""

from typing import List

_ONES = (
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
)
_TENS = ("", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety")

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000
HUNDRED = 100


def two_digit_words(n: int) -> str:
    """Words for 1..99 (empty for 0)."""
    if n < 20:
        return _ONES[n]
    tens, units = divmod(n, 10)
    return f"{_TENS[tens]} {_ONES[units]}".strip()


def _group_words(n: int) -> List[str]:
    """Words for 1..999,99,99,999 without the ``Only`` suffix."""
    words: List[str] = []

    crores, n = divmod(n, CRORE)
    lakhs, n = divmod(n, LAKH)
    thousands, n = divmod(n, THOUSAND)
    hundreds, rest = divmod(n, HUNDRED)

    if crores:
        # Counts above 99 crore are spelled out recursively
        words.extend(_group_words(crores) if crores > 99 else [two_digit_words(crores)])
        words.append("Crore")
    if lakhs:
        words.extend([two_digit_words(lakhs), "Lakh"])
    if thousands:
        words.extend([two_digit_words(thousands), "Thousand"])
    if hundreds:
        words.extend([_ONES[hundreds], "Hundred"])
    if rest:
        if words:
            words.append("and")
        words.append(two_digit_words(rest))
    return words


def amount_in_words(amount: int) -> str:
    """
    Render an integer amount in words.

    Negative amounts, such as a credit from a negative CTC, are prefixed
    with ``Minus``.

    Args:
        amount: Whole rupees

    Returns:
        Words ending in ``Only``

    Examples:
        >>> amount_in_words(1234567)
        'Twelve Lakh Thirty Four Thousand Five Hundred and Sixty Seven Only'
        >>> amount_in_words(118000)
        'One Lakh Eighteen Thousand Only'
        >>> amount_in_words(0)
        'Zero Only'
    """
    amount = int(amount)
    if amount < 0:
        return "Minus " + amount_in_words(-amount)
    if amount == 0:
        return "Zero Only"
    return " ".join(_group_words(amount) + ["Only"])
