"""src/weburl/parser/form.py

application/x-www-form-urlencoded parsing and serialization of query pairs.
"""

from typing import Iterable, List, Tuple

from weburl.parser.percent import (
    FORM_SET,
    percent_decode_bytes,
    percent_encode,
    to_scalar_values,
)

__all__ = ["QueryPair", "parse_pairs", "serialize_pair", "serialize_pairs"]

QueryPair = Tuple[str, str]


def _decode(text: str) -> str:
    data = text.encode("utf-8").replace(b"+", b" ")
    return percent_decode_bytes(data).decode("utf-8", "replace")


def parse_pairs(query: str) -> List[QueryPair]:
    """
    Decode a query string into ordered ``(name, value)`` pairs.

    Empty sequences between ``&`` are skipped; a sequence without ``=`` gets
    an empty value. ``+`` decodes to a space.
    """
    pairs: List[QueryPair] = []
    for sequence in query.split("&"):
        if not sequence:
            continue
        name, _, value = sequence.partition("=")
        pairs.append((_decode(name), _decode(value)))
    return pairs


def serialize_pair(name: str, value: str) -> str:
    """Encode one pair; only alphanumerics and ``*-._`` stay literal."""
    return "%s=%s" % (
        percent_encode(to_scalar_values(name), FORM_SET, space_as_plus=True),
        percent_encode(to_scalar_values(value), FORM_SET, space_as_plus=True),
    )


def serialize_pairs(pairs: Iterable[QueryPair]) -> str:
    return "&".join(serialize_pair(name, value) for name, value in pairs)
