"""Small string helpers used throughout the shell."""

from __future__ import annotations

_WHITESPACE = " \t\n\v\f\r"


def _skip_sign(text: str) -> tuple[int, int]:
    """Return the index after leading blanks and an optional sign, and the sign."""
    index = 0
    while index < len(text) and text[index] in _WHITESPACE:
        index += 1
    sign = 1
    if index < len(text) and text[index] in "+-":
        if text[index] == "-":
            sign = -1
        index += 1
    return index, sign


def atoi(text: str) -> int:
    """Parse a leading decimal integer, ignoring blanks before it and junk after it.

    Returns 0 when no digits follow the optional sign.
    """
    index, sign = _skip_sign(text)
    total = 0
    for char in text[index:]:
        if not ("0" <= char <= "9"):
            break
        total = total * 10 + (ord(char) - ord("0"))
    return sign * total


def _digit_value(base: str, char: str) -> int:
    for position, digit in enumerate(base):
        if digit.lower() == char or digit.upper() == char:
            return position
    return -1


def atoi_base(text: str, base: str) -> int:
    """Parse a leading integer written with the digits of ``base``.

    Digits match without regard to case. Parsing stops at the first
    character that is not a digit of the base.
    """
    index, sign = _skip_sign(text)
    radix = len(base)
    total = 0
    for char in text[index:]:
        value = _digit_value(base, char)
        if value == -1:
            break
        total = total * radix + value
    return sign * total


def split(text: str, sep: str) -> list[str]:
    """Split ``text`` on the single character ``sep``, dropping empty fields.

    An empty separator yields the whole text as one field (or no field
    when the text is empty).
    """
    if len(sep) > 1:
        raise ValueError("separator must be a single character")
    if not sep:
        return [text] if text else []
    return [field for field in text.split(sep) if field]


def strtrim(text: str, charset: str) -> str:
    """Remove every character of ``charset`` from both ends of ``text``."""
    if not charset:
        return text
    return text.strip(charset)


def substr(text: str, start: int, length: int) -> str:
    """Return at most ``length`` characters of ``text`` from index ``start``."""
    if start < 0 or length < 0:
        raise ValueError("start and length must not be negative")
    if start >= len(text):
        return ""
    return text[start:start + length]