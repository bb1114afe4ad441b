"""utils/validators.py

Scheme and path classification helpers for WebURL.
"""

from typing import Dict, Optional

SPECIAL_SCHEMES: Dict[str, Optional[int]] = {
    "ftp": 21,
    "file": None,
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
}

_ASCII_ALPHA = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_ASCII_DIGITS = frozenset("0123456789")
_SCHEME_CHARS = _ASCII_ALPHA | _ASCII_DIGITS | frozenset("+-.")


def is_special_scheme(scheme: str) -> bool:
    """Whether ``scheme`` is one of the special schemes."""
    return scheme in SPECIAL_SCHEMES


def default_port(scheme: str) -> Optional[int]:
    """Default port of a special scheme, ``None`` for every other scheme."""
    return SPECIAL_SCHEMES.get(scheme)


def is_ascii_alpha(char: str) -> bool:
    """Single ASCII letter check (empty string is not a letter)."""
    return char in _ASCII_ALPHA


def is_ascii_digit(char: str) -> bool:
    """Single ASCII digit check (empty string is not a digit)."""
    return char in _ASCII_DIGITS


def is_ascii_digits(text: str) -> bool:
    """Non-empty string made only of ASCII digits."""
    return bool(text) and all(char in _ASCII_DIGITS for char in text)


def is_scheme_char(char: str) -> bool:
    """Code point allowed after the first character of a scheme."""
    return char in _SCHEME_CHARS


def is_valid_scheme(scheme: str) -> bool:
    """ASCII letter followed by letters, digits, ``+``, ``-`` or ``.``."""
    return (
        bool(scheme)
        and is_ascii_alpha(scheme[0])
        and all(is_scheme_char(char) for char in scheme[1:])
    )


def is_windows_drive_letter(text: str) -> bool:
    """Two code points: an ASCII letter then ``:`` or ``|``."""
    return len(text) == 2 and is_ascii_alpha(text[0]) and text[1] in ":|"


def is_normalized_windows_drive_letter(text: str) -> bool:
    """Windows drive letter whose second code point is ``:``."""
    return is_windows_drive_letter(text) and text[1] == ":"
