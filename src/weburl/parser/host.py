"""src/weburl/parser/host.py

Host parsing and serialization: domains, IPv4, IPv6, opaque and empty hosts.
"""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import idna

from weburl.exceptions import (
    EmptyHostError,
    IdnaError,
    InvalidDomainCharacterError,
    InvalidIpv4AddressError,
    InvalidIpv6AddressError,
)
from weburl.parser.percent import C0_CONTROL_SET, percent_decode, percent_encode
from weburl.utils.validators import is_ascii_digit, is_ascii_digits

__all__ = ["Host", "HostKind", "parse_host", "serialize_ipv4", "serialize_ipv6"]

logger = logging.getLogger(__name__)

FORBIDDEN_HOST_CODE_POINTS = frozenset("\x00\t\n\r #/:<>?@[\\]^|")
FORBIDDEN_DOMAIN_CODE_POINTS = (
    FORBIDDEN_HOST_CODE_POINTS
    | frozenset(chr(code) for code in range(0x20))
    | frozenset("%\x7f")
)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCTAL_DIGITS = frozenset("01234567")

Ipv6Address = Tuple[int, int, int, int, int, int, int, int]


class HostKind(enum.Enum):
    """What a parsed host holds."""

    DOMAIN = "domain"
    OPAQUE = "opaque"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    EMPTY = "empty"


@dataclass(frozen=True)
class Host:
    """
    A parsed host.

    ``value`` is a string for domain and opaque hosts, an ``int`` for IPv4
    and an 8-tuple of 16-bit pieces for IPv6.
    """

    kind: HostKind
    value: Union[str, int, Tuple[int, ...]] = ""

    @classmethod
    def empty(cls) -> "Host":
        """The empty host (``file:///``, ``foo:///``)."""
        return cls(HostKind.EMPTY, "")

    @property
    def is_ip(self) -> bool:
        return self.kind in (HostKind.IPV4, HostKind.IPV6)

    @property
    def is_empty(self) -> bool:
        return self.kind is HostKind.EMPTY

    def serialize(self) -> str:
        """Host serializer: dotted IPv4, bracketed compressed IPv6, or the name."""
        if self.kind is HostKind.IPV4:
            return serialize_ipv4(self.value)  # type: ignore[arg-type]
        if self.kind is HostKind.IPV6:
            return f"[{serialize_ipv6(self.value)}]"  # type: ignore[arg-type]
        return str(self.value)

    def __str__(self) -> str:
        return self.serialize()


def parse_host(text: str, is_opaque: bool) -> Host:
    """
    Parse a host string.

    Args:
        text: The host as it appears in the URL, brackets included.
        is_opaque: True for URLs whose scheme is not special.

    Returns:
        The parsed host.

    Raises:
        ParseError: One of its subclasses, naming the failure.
    """
    if text.startswith("["):
        if not text.endswith("]"):
            raise InvalidIpv6AddressError()
        return Host(HostKind.IPV6, parse_ipv6(text[1:-1]))

    if is_opaque:
        return parse_opaque_host(text)

    if not text:
        raise EmptyHostError()

    domain = percent_decode(text)
    ascii_domain = domain_to_ascii(domain)

    for char in ascii_domain:
        if char in FORBIDDEN_DOMAIN_CODE_POINTS:
            raise InvalidDomainCharacterError()

    if ends_in_a_number(ascii_domain):
        return Host(HostKind.IPV4, parse_ipv4(ascii_domain))

    return Host(HostKind.DOMAIN, ascii_domain)


def parse_opaque_host(text: str) -> Host:
    """Opaque host of a non-special URL; ``%`` is allowed, controls are encoded."""
    if not text:
        return Host.empty()
    for char in text:
        if char in FORBIDDEN_HOST_CODE_POINTS:
            raise InvalidDomainCharacterError()
    return Host(HostKind.OPAQUE, percent_encode(text, C0_CONTROL_SET))


def domain_to_ascii(domain: str) -> str:
    """
    UTS #46 ToASCII with non-transitional mapping, no STD3 rules and no
    hyphen checks.

    ASCII labels only need lowercasing; ``xn--`` labels are checked to be
    valid Punycode and every other label is Punycode-encoded.
    """
    if domain.isascii() and "xn--" not in domain.lower():
        result = domain.lower()
    else:
        try:
            mapped = idna.uts46_remap(domain, std3_rules=False, transitional=False)
            labels = [_label_to_ascii(label) for label in mapped.split(".")]
        except (idna.IDNAError, UnicodeError) as exc:
            logger.debug("domain-to-ASCII failed for %r: %s", domain, exc)
            raise IdnaError() from exc
        result = ".".join(labels)

    if not result:
        raise IdnaError()
    return result


def _label_to_ascii(label: str) -> str:
    if not label.isascii():
        return "xn--" + label.encode("punycode").decode("ascii")
    if label.startswith("xn--"):
        _check_a_label(label)
    return label


def _check_a_label(label: str) -> None:
    """An A-label must decode to a non-ASCII label that maps to itself."""
    decoded = label[4:].encode("ascii").decode("punycode")
    if not decoded or decoded.isascii():
        raise idna.IDNAError(f"invalid A-label {label!r}")
    if idna.uts46_remap(decoded, std3_rules=False, transitional=False) != decoded:
        raise idna.IDNAError(f"A-label {label!r} is not in normal form")


def ends_in_a_number(text: str) -> bool:
    """Whether the last dot-separated label looks like an IPv4 part."""
    parts = text.split(".")
    if parts[-1] == "":
        if len(parts) == 1:
            return False
        parts.pop()

    last = parts[-1]
    if is_ascii_digits(last):
        return True
    return _parse_ipv4_number(last) is not None


def _parse_ipv4_number(text: str) -> Optional[int]:
    """Decimal, ``0``-prefixed octal or ``0x``-prefixed hex; ``None`` on failure."""
    if not text:
        return None

    digits = frozenset("0123456789")
    radix = 10
    if text[:2] in ("0x", "0X"):
        text = text[2:]
        digits = _HEX_DIGITS
        radix = 16
    elif len(text) >= 2 and text[0] == "0":
        text = text[1:]
        digits = _OCTAL_DIGITS
        radix = 8

    if not text:
        return 0
    if not all(char in digits for char in text):
        return None
    return int(text, radix)


def parse_ipv4(text: str) -> int:
    """
    Parse an IPv4 host into its 32-bit value.

    Accepts one to four parts; the last part fills all remaining bytes.
    """
    parts = text.split(".")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()

    if len(parts) > 4:
        raise InvalidIpv4AddressError()

    numbers: List[int] = []
    for part in parts:
        number = _parse_ipv4_number(part)
        if number is None:
            raise InvalidIpv4AddressError()
        numbers.append(number)

    if any(number > 255 for number in numbers[:-1]):
        raise InvalidIpv4AddressError()
    if numbers[-1] >= 256 ** (5 - len(numbers)):
        raise InvalidIpv4AddressError()

    address = numbers[-1]
    for counter, number in enumerate(numbers[:-1]):
        address += number * 256 ** (3 - counter)
    return address


def serialize_ipv4(address: int) -> str:
    return ".".join(str((address >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def parse_ipv6(text: str) -> Ipv6Address:
    """Parse the text between the brackets of an IPv6 host."""
    address = [0] * 8
    piece_index = 0
    compress: Optional[int] = None
    pointer = 0
    length = len(text)

    def char_at(index: int) -> str:
        return text[index] if index < length else ""

    if char_at(0) == ":":
        if char_at(1) != ":":
            raise InvalidIpv6AddressError()
        pointer += 2
        piece_index += 1
        compress = piece_index

    while pointer < length:
        if piece_index == 8:
            raise InvalidIpv6AddressError()

        if text[pointer] == ":":
            if compress is not None:
                raise InvalidIpv6AddressError()
            pointer += 1
            piece_index += 1
            compress = piece_index
            continue

        value = 0
        digits = 0
        while digits < 4 and char_at(pointer) in _HEX_DIGITS:
            value = value * 0x10 + int(text[pointer], 16)
            pointer += 1
            digits += 1

        if char_at(pointer) == ".":
            # Embedded IPv4 fills the last two pieces.
            if digits == 0:
                raise InvalidIpv6AddressError()
            pointer -= digits
            if piece_index > 6:
                raise InvalidIpv6AddressError()

            numbers_seen = 0
            while pointer < length:
                ipv4_piece: Optional[int] = None
                if numbers_seen > 0:
                    if text[pointer] == "." and numbers_seen < 4:
                        pointer += 1
                    else:
                        raise InvalidIpv6AddressError()
                if not is_ascii_digit(char_at(pointer)):
                    raise InvalidIpv6AddressError()
                while is_ascii_digit(char_at(pointer)):
                    number = int(text[pointer])
                    if ipv4_piece is None:
                        ipv4_piece = number
                    elif ipv4_piece == 0:
                        raise InvalidIpv6AddressError()
                    else:
                        ipv4_piece = ipv4_piece * 10 + number
                    if ipv4_piece > 255:
                        raise InvalidIpv6AddressError()
                    pointer += 1
                address[piece_index] = address[piece_index] * 0x100 + ipv4_piece
                numbers_seen += 1
                if numbers_seen in (2, 4):
                    piece_index += 1

            if numbers_seen != 4:
                raise InvalidIpv6AddressError()
            break

        if char_at(pointer) == ":":
            pointer += 1
            if pointer >= length:
                raise InvalidIpv6AddressError()
        elif pointer < length:
            raise InvalidIpv6AddressError()

        address[piece_index] = value
        piece_index += 1

    if compress is not None:
        swaps = piece_index - compress
        piece_index = 7
        while piece_index != 0 and swaps > 0:
            other = compress + swaps - 1
            address[piece_index], address[other] = address[other], address[piece_index]
            piece_index -= 1
            swaps -= 1
    elif piece_index != 8:
        raise InvalidIpv6AddressError()

    return tuple(address)  # type: ignore[return-value]


def _longest_zero_run(address: Tuple[int, ...]) -> Optional[int]:
    """Start of the first longest run of two or more zero pieces."""
    best_start: Optional[int] = None
    best_length = 1
    start: Optional[int] = None
    for index, piece in enumerate(address + (1,)):
        if piece == 0:
            if start is None:
                start = index
        elif start is not None:
            if index - start > best_length:
                best_start = start
                best_length = index - start
            start = None
    return best_start


def serialize_ipv6(address: Tuple[int, ...]) -> str:
    """Lowercase hex pieces with the first longest zero run compressed to ``::``."""
    compress = _longest_zero_run(address)
    output = ""
    ignore_zero = False
    for piece_index, piece in enumerate(address):
        if ignore_zero and piece == 0:
            continue
        ignore_zero = False
        if compress == piece_index:
            output += "::" if piece_index == 0 else ":"
            ignore_zero = True
            continue
        output += format(piece, "x")
        if piece_index != 7:
            output += ":"
    return output
