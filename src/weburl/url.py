"""src/weburl/url.py

Mutable URL value with WHATWG accessors and query multimap operations.
"""

import logging
from typing import List, Optional

from weburl.config import ParserOptions
from weburl.parser.basic import UrlParser, UrlRecord
from weburl.parser.form import QueryPair, parse_pairs, serialize_pair, serialize_pairs
from weburl.parser.percent import (
    C0_CONTROL_SET,
    FRAGMENT_SET,
    QUERY_SET,
    SPECIAL_QUERY_SET,
    percent_encode,
    strip_tab_and_newline,
    to_scalar_values,
)
from weburl.utils.validators import default_port, is_special_scheme, is_valid_scheme

__all__ = ["URL", "parse"]

logger = logging.getLogger(__name__)


def parse(url: str, options: Optional[ParserOptions] = None) -> "URL":
    """
    Parse an absolute URL.

    Args:
        url: The URL string.
        options: Parser configuration.

    Returns:
        A new URL value.

    Raises:
        ParseError: If ``url`` is empty or not a valid absolute URL.
    """
    return URL(url, options)


class URL:
    """
    A parsed, mutable URL.

    Every setter re-normalizes the affected component so that ``href`` always
    parses back to the same value.
    """

    __slots__ = ("_record",)

    def __init__(self, url: str, options: Optional[ParserOptions] = None):
        self._record: UrlRecord = UrlParser(options).parse(url)

    @classmethod
    def _from_record(cls, record: UrlRecord) -> "URL":
        instance = cls.__new__(cls)
        instance._record = record
        return instance

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @property
    def href(self) -> str:
        """Full canonical serialization."""
        return self._record.serialize()

    def to_string(self) -> str:
        """Same as :attr:`href`."""
        return self.href

    def __str__(self) -> str:
        return self.href

    def __repr__(self) -> str:
        return f"URL({self.href!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URL):
            return NotImplemented
        return self.href == other.href

    def __hash__(self) -> int:
        return hash(self.href)

    def copy(self) -> "URL":
        """Independent copy; mutating it leaves this URL untouched."""
        return URL._from_record(self._record.copy())

    # ------------------------------------------------------------------
    # Scheme
    # ------------------------------------------------------------------

    @property
    def scheme(self) -> str:
        """Lowercase scheme, without the trailing ``:``."""
        return self._record.scheme

    @scheme.setter
    def scheme(self, value: str) -> None:
        self.set_scheme(value)

    def set_scheme(self, value: str) -> bool:
        """
        Replace the scheme.

        The change is refused when it would move between a special and a
        non-special scheme, when ``value`` is not a valid scheme, or when the
        ``file`` scheme cannot represent the current host, credentials or
        port. A refused change leaves the URL untouched.

        Args:
            value: New scheme, optionally followed by ``:``.

        Returns:
            True if the scheme was changed.
        """
        record = self._record
        scheme = strip_tab_and_newline(value)
        if scheme.endswith(":"):
            scheme = scheme[:-1]
        scheme = scheme.lower()

        if not is_valid_scheme(scheme):
            return self._reject_scheme(scheme, "invalid scheme syntax")
        if is_special_scheme(scheme) != record.is_special:
            return self._reject_scheme(
                scheme, "special and non-special schemes differ"
            )
        if scheme == "file" and record.host is not None:
            return self._reject_scheme(scheme, "file URLs cannot take over a host")
        if record.scheme == "file" and record.host is not None and record.host.is_empty:
            return self._reject_scheme(scheme, "file URL has an empty host")

        record.scheme = scheme
        if record.port is not None and record.port == default_port(scheme):
            record.port = None

        return True

    def _reject_scheme(self, scheme: str, reason: str) -> bool:
        logger.debug(
            "Scheme change %r -> %r ignored: %s", self._record.scheme, scheme, reason
        )
        return False

    # ------------------------------------------------------------------
    # Authority
    # ------------------------------------------------------------------

    @property
    def username(self) -> str:
        """Percent-encoded username, or ``""``."""
        return self._record.username

    @property
    def password(self) -> str:
        """Percent-encoded password, or ``""``."""
        return self._record.password

    @property
    def has_host(self) -> bool:
        """True when the URL has a host, even an empty one."""
        return self._record.host is not None

    @property
    def host(self) -> str:
        """Serialized host (IPv6 in brackets), or ``""`` when there is none."""
        host = self._record.host
        return host.serialize() if host is not None else ""

    @property
    def domain(self) -> str:
        """Host name, or ``""`` for IP literals, empty and missing hosts."""
        host = self._record.host
        if host is None or host.is_ip or host.is_empty:
            return ""
        return str(host.value)

    @property
    def port(self) -> Optional[int]:
        """Explicit port; ``None`` when absent or equal to the scheme default."""
        return self._record.port

    @property
    def port_or_known_default(self) -> Optional[int]:
        """Explicit port, else the default port of a special scheme."""
        if self._record.port is not None:
            return self._record.port
        return default_port(self._record.scheme)

    @property
    def is_special(self) -> bool:
        """True for http, https, ws, wss, ftp and file URLs."""
        return self._record.is_special

    @property
    def cannot_be_a_base(self) -> bool:
        """True for URLs with an opaque path, such as ``mailto:`` URLs."""
        return self._record.has_opaque_path

    # ------------------------------------------------------------------
    # Path
    # ------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._record.serialize_path()

    @path.setter
    def path(self, value: str) -> None:
        self.set_path(value)

    def set_path(self, value: str) -> None:
        """
        Replace the path.

        Hierarchical paths are re-parsed segment by segment (dot segments are
        resolved, special URLs always start with ``/``). Opaque paths take the
        new value with ``?``, ``#``, a leading ``/`` and controls encoded.
        """
        record = self._record
        if not record.has_opaque_path:
            UrlParser().parse_path(record, value)
            return

        text = strip_tab_and_newline(to_scalar_values(value))
        prefix = ""
        if text.startswith("/"):
            prefix = "%2F"
            text = text[1:]
        encoded = percent_encode(text, C0_CONTROL_SET)
        record.path = prefix + encoded.replace("?", "%3F").replace("#", "%23")
        record.strip_trailing_spaces_from_opaque_path()

    # ------------------------------------------------------------------
    # Query and fragment
    # ------------------------------------------------------------------

    @property
    def query(self) -> str:
        """Raw query without the leading ``?``; ``""`` when absent."""
        return self._record.query or ""

    @query.setter
    def query(self, value: Optional[str]) -> None:
        self.set_query(value)

    def set_query(self, value: Optional[str]) -> None:
        """Install ``value`` as the query; ``None`` or ``""`` removes it."""
        record = self._record
        text = strip_tab_and_newline(to_scalar_values(value)) if value else ""
        if not text:
            record.query = None
            record.strip_trailing_spaces_from_opaque_path()
            return
        encode_set = SPECIAL_QUERY_SET if record.is_special else QUERY_SET
        record.query = percent_encode(text, encode_set)

    @property
    def fragment(self) -> str:
        """Raw fragment without the leading ``#``; ``""`` when absent."""
        return self._record.fragment or ""

    @fragment.setter
    def fragment(self, value: Optional[str]) -> None:
        self.set_fragment(value)

    def set_fragment(self, value: Optional[str]) -> None:
        """Install ``value`` as the fragment; ``None`` or ``""`` removes it."""
        record = self._record
        text = strip_tab_and_newline(to_scalar_values(value)) if value else ""
        if not text:
            record.fragment = None
            record.strip_trailing_spaces_from_opaque_path()
            return
        record.fragment = percent_encode(text, FRAGMENT_SET)

    hash = fragment

    # ------------------------------------------------------------------
    # Query pairs
    # ------------------------------------------------------------------

    def query_pairs(self) -> List[QueryPair]:
        """Decoded ``(key, value)`` pairs in query order."""
        return parse_pairs(self._record.query or "")

    def query_clear(self) -> None:
        """Remove the query component entirely."""
        self.set_query(None)

    def query_delete(self, key: str) -> None:
        """Remove every pair named ``key``; an emptied query is removed."""
        remaining = [pair for pair in self.query_pairs() if pair[0] != key]
        self._record.query = serialize_pairs(remaining)
        if self._record.query == "":
            self.set_query(None)

    def query_append(self, key: str, value: str) -> None:
        """Add a pair after all existing ones."""
        pair = serialize_pair(key, value)
        query = self._record.query
        self._record.query = f"{query}&{pair}" if query else pair

    def query_set(self, key: str, value: str) -> None:
        """Replace all pairs named ``key`` with one pair at the end of the query."""
        self.query_delete(key)
        self.query_append(key, value)

    def query_get(self, key: str) -> str:
        """Value of the first pair named ``key``, or ``""``."""
        for name, value in self.query_pairs():
            if name == key:
                return value
        return ""

    def query_gets(self, key: str) -> List[str]:
        """Values of every pair named ``key``, in order."""
        return [value for name, value in self.query_pairs() if name == key]
