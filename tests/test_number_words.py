from decimal import Decimal

import pytest

from billing_docs.number_words import amount_in_words, convert


@pytest.mark.parametrize("n, expected", [
    (0, "zero"),
    (7, "seven"),
    (15, "fifteen"),
    (20, "twenty"),
    (21, "twenty-one"),
    (100, "one hundred"),
    (105, "one hundred and five"),
    (999, "nine hundred and ninety-nine"),
    (1250, "one thousand two hundred and fifty"),
    (1000000, "one million"),
    (1000050, "one million fifty"),
    (2000000001, "two billion one"),
    (3000000000000, "three trillion"),
])
def test_convert(n, expected):
    assert convert(n) == expected


def test_convert_skips_zero_groups():
    assert convert(1001000) == "one million one thousand"


def test_convert_largest_supported_value():
    words = convert(10 ** 15 - 1)
    assert words.startswith("nine hundred and ninety-nine trillion")


@pytest.mark.parametrize("bad", [-1, 1.5, True, 10 ** 15])
def test_convert_rejects_invalid_input(bad):
    with pytest.raises(ValueError):
        convert(bad)


def test_amount_in_words_floors_the_amount():
    assert amount_in_words(Decimal("1180.99"), "Uganda Shillings") == \
        "one thousand one hundred and eighty Uganda Shillings Only"


def test_amount_in_words_zero():
    assert amount_in_words(0, "UGX") == "zero UGX Only"
