"""English words rendering of whole currency amounts."""

from decimal import Decimal, ROUND_FLOOR
from typing import List, Union

ONES = [
    "zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen",
    "seventeen", "eighteen", "nineteen",
]
TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]

# Index = base-1000 group position, least significant first
SCALES = ["", "thousand", "million", "billion", "trillion"]


def _tens_ones(n: int) -> str:
    if n < 20:
        return ONES[n]
    tens, ones = divmod(n, 10)
    if ones:
        return f"{TENS[tens]}-{ONES[ones]}"
    return TENS[tens]


def _group(n: int) -> str:
    """Render 1..999."""
    hundreds, rest = divmod(n, 100)
    if not hundreds:
        return _tens_ones(rest)
    text = f"{ONES[hundreds]} hundred"
    if rest:
        text += f" and {_tens_ones(rest)}"
    return text


def convert(n: int) -> str:
    """
    Convert a non-negative integer to English words.

    >>> convert(1250)
    'one thousand two hundred and fifty'
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"expected a non-negative integer, got {n!r}")
    if n < 0:
        raise ValueError(f"expected a non-negative integer, got {n}")
    if n == 0:
        return "zero"
    if n >= 1000 ** len(SCALES):
        raise ValueError("amount too large to render in words")

    parts: List[str] = []
    position = 0
    while n:
        n, group = divmod(n, 1000)
        if group:
            parts.append(f"{_group(group)} {SCALES[position]}".strip())
        position += 1

    return " ".join(reversed(parts))


def amount_in_words(amount: Union[int, float, Decimal], unit: str) -> str:
    """Floor an amount and render it as '<words> <unit> Only'."""
    value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    whole = int(value.to_integral_value(rounding=ROUND_FLOOR))
    return f"{convert(whole)} {unit} Only"
