import re
from typing import Any, Optional

from catalog.errors import InvalidFormatError

HEX_CHARS = frozenset("0123456789abcdef")
# int() refuses longer decimal strings by default (Python 3.11+)
MAX_NUMBER_DIGITS = 4300
_DIGITS = re.compile(r"[0-9]+")

HEX_ERROR_MESSAGE = "Invalid hex prefix, please provide two hex characters (0-9a-f)"
ID_ERROR_MESSAGE = (
    "Invalid id prefix, please provide two hex characters (0-9a-f), "
    "a dash '-' and a positive integer."
)
NUMBER_ERROR_MESSAGE = "Must provide a positive integer"


def clean_string(raw: str) -> str:
    return raw.strip().lower()


class BookIdValidator:
    """Validators for hex prefixes and composite book ids ("ab-12").

    The ``is_*`` predicates never raise; the ``clean_*``/``parse_*`` helpers
    normalize their input and raise InvalidFormatError when it is invalid.
    Zero counts as a valid number.
    """

    @staticmethod
    def is_hex_prefix(value: Any) -> bool:
        if not isinstance(value, str) or len(value) != 2:
            return False
        return all(ch in HEX_CHARS for ch in value.lower())

    @staticmethod
    def is_non_negative_int(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        stripped = value.strip()
        if len(stripped) > MAX_NUMBER_DIGITS:
            return False
        return _DIGITS.fullmatch(stripped) is not None

    @staticmethod
    def is_book_id(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        parts = clean_string(value).split("-")
        if len(parts) != 2:
            return False
        prefix, number = parts
        return BookIdValidator.is_hex_prefix(prefix) and BookIdValidator.is_non_negative_int(number)

    @staticmethod
    def clean_hex(value: Any) -> str:
        if isinstance(value, str):
            value = value.strip()
        if not BookIdValidator.is_hex_prefix(value):
            raise InvalidFormatError(HEX_ERROR_MESSAGE)
        return value.lower()

    @staticmethod
    def parse_non_negative_int(value: Any) -> int:
        if not BookIdValidator.is_non_negative_int(value):
            raise InvalidFormatError(NUMBER_ERROR_MESSAGE)
        try:
            return int(value.strip())
        except ValueError as e:
            raise InvalidFormatError(NUMBER_ERROR_MESSAGE) from e

    @staticmethod
    def clean_id(value: Any) -> str:
        """Return the canonical form of a book id, e.g. " AB-007 " -> "ab-7"."""
        if not BookIdValidator.is_book_id(value):
            raise InvalidFormatError(ID_ERROR_MESSAGE)
        prefix, number = clean_string(value).split("-")
        try:
            return make_book_id(prefix, int(number))
        except ValueError as e:
            raise InvalidFormatError(ID_ERROR_MESSAGE) from e

    @staticmethod
    def make_id(prefix: Any, number: Any) -> str:
        """Build a canonical book id from a separately entered prefix and number."""
        return make_book_id(BookIdValidator.clean_hex(prefix), BookIdValidator.parse_non_negative_int(number))


def make_book_id(prefix: str, number: int) -> str:
    return f"{prefix}-{number}"


class TextValidator:
    """Checks for free-text book fields."""

    @staticmethod
    def _is_non_empty(text: Optional[str]) -> bool:
        if text is None:
            return False
        return bool(text.strip())

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return TextValidator._is_non_empty(title)

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        return TextValidator._is_non_empty(author)
