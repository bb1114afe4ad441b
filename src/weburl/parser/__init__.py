"""src/weburl/parser/__init__.py

Parsing layer for WebURL.

This package turns strings into URL records and back: the basic URL parser
state machine, host parsing (domains, IPv4, IPv6, opaque hosts),
percent-encoding and form-urlencoded query pairs.
"""

from .basic import UrlParser, UrlRecord
from .form import parse_pairs, serialize_pairs
from .host import Host, HostKind, parse_host

__all__ = [
    "UrlParser",
    "UrlRecord",
    "Host",
    "HostKind",
    "parse_host",
    "parse_pairs",
    "serialize_pairs",
]
