"""src/weburl/parser/percent.py

Percent-encode sets and UTF-8 percent-encoding helpers.

Every set lists the ASCII code points it encodes. Code points above U+007E
are always encoded, so only ASCII has to be spelled out.
"""

from typing import FrozenSet, Iterable

__all__ = [
    "C0_CONTROL_SET",
    "FRAGMENT_SET",
    "QUERY_SET",
    "SPECIAL_QUERY_SET",
    "PATH_SET",
    "USERINFO_SET",
    "COMPONENT_SET",
    "FORM_SET",
    "percent_encode",
    "percent_decode",
    "percent_decode_bytes",
    "to_scalar_values",
    "strip_tab_and_newline",
]


def _ascii_set(chars: Iterable[str]) -> FrozenSet[int]:
    return frozenset(ord(char) for char in chars)


C0_CONTROL_SET: FrozenSet[int] = frozenset(range(0x20)) | {0x7F}
FRAGMENT_SET = C0_CONTROL_SET | _ascii_set(' "<>`')
QUERY_SET = C0_CONTROL_SET | _ascii_set(' "#<>')
SPECIAL_QUERY_SET = QUERY_SET | _ascii_set("'")
PATH_SET = QUERY_SET | _ascii_set("?^`{}")
USERINFO_SET = PATH_SET | _ascii_set("/:;=@[\\]|")
COMPONENT_SET = USERINFO_SET | _ascii_set("$%&+,")
FORM_SET = COMPONENT_SET | _ascii_set("!'()~")

_HEX_DIGITS = b"0123456789abcdefABCDEF"


def to_scalar_values(text: str) -> str:
    """Replace lone surrogates with U+FFFD, keeping well-formed pairs."""
    try:
        text.encode("utf-8")
        return text
    except UnicodeEncodeError:
        return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def strip_tab_and_newline(text: str) -> str:
    """Remove every ASCII tab, LF and CR."""
    if "\t" in text or "\n" in text or "\r" in text:
        return text.replace("\t", "").replace("\n", "").replace("\r", "")
    return text


def percent_encode(
    text: str, encode_set: FrozenSet[int], space_as_plus: bool = False
) -> str:
    """
    UTF-8 percent-encode ``text``.

    Args:
        text: Code points to encode.
        encode_set: ASCII code points that must be encoded.
        space_as_plus: Emit ``+`` for U+0020 (form serialization).

    Returns:
        The encoded string, using uppercase hex digits.
    """
    out = []
    for char in text:
        code = ord(char)
        if space_as_plus and code == 0x20:
            out.append("+")
        elif code < 0x80 and code not in encode_set:
            out.append(char)
        else:
            out.extend("%%%02X" % byte for byte in char.encode("utf-8"))
    return "".join(out)


def percent_decode_bytes(data: bytes) -> bytes:
    """Decode ``%XX`` sequences; a ``%`` not followed by two hex digits is kept."""
    if b"%" not in data:
        return data

    out = bytearray()
    i = 0
    n = len(data)
    while i < n:
        byte = data[i]
        if (
            byte == 0x25
            and i + 2 < n
            and data[i + 1] in _HEX_DIGITS
            and data[i + 2] in _HEX_DIGITS
        ):
            out.append(int(data[i + 1 : i + 3], 16))
            i += 3
        else:
            out.append(byte)
            i += 1
    return bytes(out)


def percent_decode(text: str) -> str:
    """Percent-decode ``text`` and decode the bytes as UTF-8, lossily."""
    return percent_decode_bytes(text.encode("utf-8")).decode("utf-8", "replace")
