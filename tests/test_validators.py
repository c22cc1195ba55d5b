import itertools

import pytest

from catalog.errors import InvalidFormatError
from catalog.validators import BookIdValidator, TextValidator

HEX = "0123456789abcdef"


def test_hex_prefix_accepts_every_hex_pair_in_any_case():
    for a, b in itertools.product(HEX + "ABCDEF", repeat=2):
        assert BookIdValidator.is_hex_prefix(a + b), a + b


@pytest.mark.parametrize("value", ["g1", "1g", "zz", "a ", " a", "--", "0x", "", "a", "abc", "ａb"])
def test_hex_prefix_rejects_invalid(value):
    assert BookIdValidator.is_hex_prefix(value) is False


def test_hex_prefix_rejects_non_strings():
    assert BookIdValidator.is_hex_prefix(None) is False
    assert BookIdValidator.is_hex_prefix(15) is False


def test_accepts_0f_and_rejects_g1():
    assert BookIdValidator.is_hex_prefix("0f")
    assert not BookIdValidator.is_hex_prefix("g1")


@pytest.mark.parametrize("value", ["0", "7", "42", " 12 ", "007"])
def test_non_negative_int_accepts(value):
    assert BookIdValidator.is_non_negative_int(value)


@pytest.mark.parametrize("value", ["-1", "+1", "1.5", "abc", "12abc", "", "   ", "1 2", "²"])
def test_non_negative_int_rejects(value):
    assert BookIdValidator.is_non_negative_int(value) is False


@pytest.mark.parametrize("value", ["ab-1", "AB-1", "0f-0", " ab-12 ", "ff-007", "ab- 3"])
def test_book_id_accepts(value):
    assert BookIdValidator.is_book_id(value)


@pytest.mark.parametrize(
    "value",
    ["ab1", "ab--1", "ab-1-2", "g1-1", "abc-1", "a-1", "ab-", "-1", "ab-x", "ab-1.0", "ab_1", ""],
)
def test_book_id_rejects(value):
    assert BookIdValidator.is_book_id(value) is False


def test_clean_id_normalizes_case_whitespace_and_leading_zeros():
    assert BookIdValidator.clean_id(" AB-007 ") == "ab-7"
    assert BookIdValidator.clean_id("0f-0") == "0f-0"


def test_clean_id_raises_on_invalid_id():
    with pytest.raises(InvalidFormatError, match="Invalid id prefix"):
        BookIdValidator.clean_id("zz-1")


def test_clean_hex():
    assert BookIdValidator.clean_hex(" AB ") == "ab"
    with pytest.raises(InvalidFormatError, match="Invalid hex prefix"):
        BookIdValidator.clean_hex("g1")


def test_parse_non_negative_int():
    assert BookIdValidator.parse_non_negative_int(" 0 ") == 0
    with pytest.raises(InvalidFormatError, match="positive integer"):
        BookIdValidator.parse_non_negative_int("-3")


def test_make_id():
    assert BookIdValidator.make_id("AB", " 12 ") == "ab-12"
    with pytest.raises(ValueError):
        BookIdValidator.make_id("ab", "twelve")


def test_text_validator():
    assert TextValidator.validate_title("1984")
    assert TextValidator.validate_author("Herbert")
    assert not TextValidator.validate_title("   ")
    assert not TextValidator.validate_author(None)


def test_overlong_numbers_are_rejected_consistently():
    huge = "9" * 5000

    assert BookIdValidator.is_non_negative_int(huge) is False
    assert BookIdValidator.is_book_id("ab-" + huge) is False
    with pytest.raises(InvalidFormatError, match="Invalid id prefix"):
        BookIdValidator.clean_id("ab-" + huge)
    with pytest.raises(InvalidFormatError, match="positive integer"):
        BookIdValidator.parse_non_negative_int(huge)


def test_longest_accepted_number_parses():
    longest = "9" * 4300

    assert BookIdValidator.is_book_id("ab-" + longest)
    assert BookIdValidator.clean_id("ab-" + longest) == "ab-" + longest
