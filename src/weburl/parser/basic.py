"""src/weburl/parser/basic.py

WHATWG basic URL parser (absolute URLs only) and the URL record it fills.
"""

# pylint: disable=too-many-branches,too-many-statements,too-many-instance-attributes

import enum
import logging
from typing import Callable, Dict, List, Optional, Union

from weburl.config import ParserOptions
from weburl.exceptions import (
    EmptyHostError,
    InputTooLongError,
    InvalidPortError,
    RelativeUrlWithoutBaseError,
)
from weburl.parser.host import Host, HostKind, parse_host
from weburl.parser.percent import (
    C0_CONTROL_SET,
    FRAGMENT_SET,
    PATH_SET,
    QUERY_SET,
    SPECIAL_QUERY_SET,
    USERINFO_SET,
    percent_encode,
    strip_tab_and_newline,
    to_scalar_values,
)
from weburl.utils.validators import (
    default_port,
    is_ascii_alpha,
    is_ascii_digit,
    is_normalized_windows_drive_letter,
    is_scheme_char,
    is_special_scheme,
    is_windows_drive_letter,
)

__all__ = ["UrlRecord", "UrlParser", "State"]

logger = logging.getLogger(__name__)

EOF = ""

_C0_CONTROL_OR_SPACE = "".join(chr(code) for code in range(0x21))
_SINGLE_DOT_SEGMENTS = frozenset([".", "%2e"])
_DOUBLE_DOT_SEGMENTS = frozenset(["..", ".%2e", "%2e.", "%2e%2e"])
_AUTHORITY_TERMINATORS = ("/", "?", "#")


class State(enum.Enum):
    """Basic URL parser states reachable without a base URL."""

    SCHEME_START = "scheme start"
    SCHEME = "scheme"
    SPECIAL_AUTHORITY_SLASHES = "special authority slashes"
    SPECIAL_AUTHORITY_IGNORE_SLASHES = "special authority ignore slashes"
    PATH_OR_AUTHORITY = "path or authority"
    AUTHORITY = "authority"
    HOST = "host"
    PORT = "port"
    FILE = "file"
    FILE_SLASH = "file slash"
    FILE_HOST = "file host"
    PATH_START = "path start"
    PATH = "path"
    OPAQUE_PATH = "opaque path"
    QUERY = "query"
    FRAGMENT = "fragment"


class UrlRecord:
    """
    Structured URL components.

    ``path`` is a list of percent-encoded segments, or a plain string when the
    URL has an opaque path (``mailto:user@example.com``).
    """

    __slots__ = (
        "scheme",
        "username",
        "password",
        "host",
        "port",
        "path",
        "query",
        "fragment",
    )

    def __init__(self) -> None:
        self.scheme: str = ""
        self.username: str = ""
        self.password: str = ""
        self.host: Optional[Host] = None
        self.port: Optional[int] = None
        self.path: Union[List[str], str] = []
        self.query: Optional[str] = None
        self.fragment: Optional[str] = None

    @property
    def is_special(self) -> bool:
        return is_special_scheme(self.scheme)

    @property
    def has_opaque_path(self) -> bool:
        return isinstance(self.path, str)

    @property
    def includes_credentials(self) -> bool:
        return bool(self.username or self.password)

    def copy(self) -> "UrlRecord":
        """Independent copy; the path list is not shared."""
        other = UrlRecord()
        for name in self.__slots__:
            setattr(other, name, getattr(self, name))
        if isinstance(self.path, list):
            other.path = list(self.path)
        return other

    def shorten_path(self) -> None:
        """Drop the last segment, keeping a lone ``file`` drive letter."""
        path = self.path
        assert isinstance(path, list)
        if (
            self.scheme == "file"
            and len(path) == 1
            and is_normalized_windows_drive_letter(path[0])
        ):
            return
        if path:
            path.pop()

    def strip_trailing_spaces_from_opaque_path(self) -> None:
        """Opaque paths may not end in spaces once nothing follows them."""
        if not self.has_opaque_path:
            return
        if self.fragment is not None or self.query is not None:
            return
        self.path = str(self.path).rstrip(" ")

    def serialize_path(self) -> str:
        if isinstance(self.path, str):
            return self.path
        return "".join("/" + segment for segment in self.path)

    def serialize(self) -> str:
        """URL serializer."""
        output = self.scheme + ":"
        if self.host is not None:
            output += "//"
            if self.includes_credentials:
                output += self.username
                if self.password:
                    output += ":" + self.password
                output += "@"
            output += self.host.serialize()
            if self.port is not None:
                output += f":{self.port}"
        elif (
            not self.has_opaque_path and len(self.path) > 1 and self.path[0] == ""
        ):
            output += "/."
        output += self.serialize_path()
        if self.query is not None:
            output += "?" + self.query
        if self.fragment is not None:
            output += "#" + self.fragment
        return output


class _StateMachine:
    """One run of the basic URL parser over a prepared input."""

    def __init__(
        self,
        text: str,
        record: UrlRecord,
        state: State,
        state_override: Optional[State] = None,
    ):
        self.text = text
        self.record = record
        self.state = state
        self.state_override = state_override
        self.pointer = 0
        self.buffer = ""
        self.at_sign_seen = False
        self.inside_brackets = False
        self.password_token_seen = False
        self._handlers: Dict[State, Callable[[str], None]] = {
            State.SCHEME_START: self._scheme_start,
            State.SCHEME: self._scheme,
            State.SPECIAL_AUTHORITY_SLASHES: self._special_authority_slashes,
            State.SPECIAL_AUTHORITY_IGNORE_SLASHES: (
                self._special_authority_ignore_slashes
            ),
            State.PATH_OR_AUTHORITY: self._path_or_authority,
            State.AUTHORITY: self._authority,
            State.HOST: self._host,
            State.PORT: self._port,
            State.FILE: self._file,
            State.FILE_SLASH: self._file_slash,
            State.FILE_HOST: self._file_host,
            State.PATH_START: self._path_start,
            State.PATH: self._path,
            State.OPAQUE_PATH: self._opaque_path,
            State.QUERY: self._query,
            State.FRAGMENT: self._fragment,
        }

    def run(self) -> UrlRecord:
        length = len(self.text)
        while True:
            char = self.text[self.pointer] if self.pointer < length else EOF
            self._handlers[self.state](char)
            if self.pointer >= length:
                break
            self.pointer += 1
        return self.record

    def remaining_starts_with(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pointer + 1)

    def validation_error(self, name: str) -> None:
        logger.debug(
            "URL validation error %s at %d in %r", name, self.pointer, self.text
        )

    def _is_authority_end(self, char: str) -> bool:
        return (
            char == EOF
            or char in _AUTHORITY_TERMINATORS
            or (char == "\\" and self.record.is_special)
        )

    def _is_slash(self, char: str) -> bool:
        return char == "/" or (char == "\\" and self.record.is_special)

    # ------------------------------------------------------------------
    # Scheme
    # ------------------------------------------------------------------

    def _scheme_start(self, char: str) -> None:
        if is_ascii_alpha(char):
            self.buffer += char.lower()
            self.state = State.SCHEME
        else:
            self.validation_error("missing-scheme-non-relative-URL")
            raise RelativeUrlWithoutBaseError()

    def _scheme(self, char: str) -> None:
        if is_scheme_char(char):
            self.buffer += char.lower()
            return

        if char != ":":
            self.validation_error("missing-scheme-non-relative-URL")
            raise RelativeUrlWithoutBaseError()

        record = self.record
        record.scheme = self.buffer
        self.buffer = ""
        if record.scheme == "file":
            if not self.remaining_starts_with("//"):
                self.validation_error("special-scheme-missing-following-solidus")
            self.state = State.FILE
        elif record.is_special:
            self.state = State.SPECIAL_AUTHORITY_SLASHES
        elif self.remaining_starts_with("/"):
            self.state = State.PATH_OR_AUTHORITY
            self.pointer += 1
        else:
            record.path = ""
            self.state = State.OPAQUE_PATH

    # ------------------------------------------------------------------
    # Authority
    # ------------------------------------------------------------------

    def _special_authority_slashes(self, char: str) -> None:
        if char == "/" and self.remaining_starts_with("/"):
            self.state = State.SPECIAL_AUTHORITY_IGNORE_SLASHES
            self.pointer += 1
        else:
            self.validation_error("special-scheme-missing-following-solidus")
            self.state = State.SPECIAL_AUTHORITY_IGNORE_SLASHES
            self.pointer -= 1

    def _special_authority_ignore_slashes(self, char: str) -> None:
        if char not in ("/", "\\"):
            self.state = State.AUTHORITY
            self.pointer -= 1
        else:
            self.validation_error("special-scheme-missing-following-solidus")

    def _path_or_authority(self, char: str) -> None:
        if char == "/":
            self.state = State.AUTHORITY
        else:
            self.state = State.PATH
            self.pointer -= 1

    def _authority(self, char: str) -> None:
        record = self.record
        if char == "@":
            self.validation_error("invalid-credentials")
            if self.at_sign_seen:
                self.buffer = "%40" + self.buffer
            self.at_sign_seen = True
            for code_point in self.buffer:
                if code_point == ":" and not self.password_token_seen:
                    self.password_token_seen = True
                    continue
                encoded = percent_encode(code_point, USERINFO_SET)
                if self.password_token_seen:
                    record.password += encoded
                else:
                    record.username += encoded
            self.buffer = ""
        elif self._is_authority_end(char):
            if self.at_sign_seen and self.buffer == "":
                self.validation_error("host-missing")
                raise EmptyHostError()
            self.pointer -= len(self.buffer) + 1
            self.buffer = ""
            self.state = State.HOST
        else:
            self.buffer += char

    def _host(self, char: str) -> None:
        record = self.record
        if char == ":" and not self.inside_brackets:
            if self.buffer == "":
                self.validation_error("host-missing")
                raise EmptyHostError()
            record.host = parse_host(self.buffer, not record.is_special)
            self.buffer = ""
            self.state = State.PORT
        elif self._is_authority_end(char):
            self.pointer -= 1
            if record.is_special and self.buffer == "":
                self.validation_error("host-missing")
                raise EmptyHostError()
            record.host = parse_host(self.buffer, not record.is_special)
            self.buffer = ""
            self.state = State.PATH_START
        else:
            if char == "[":
                self.inside_brackets = True
            elif char == "]":
                self.inside_brackets = False
            self.buffer += char

    def _port(self, char: str) -> None:
        record = self.record
        if is_ascii_digit(char):
            self.buffer += char
        elif self._is_authority_end(char):
            if self.buffer:
                port = int(self.buffer)
                if port > 65535:
                    self.validation_error("port-out-of-range")
                    raise InvalidPortError()
                record.port = None if port == default_port(record.scheme) else port
                self.buffer = ""
            self.state = State.PATH_START
            self.pointer -= 1
        else:
            self.validation_error("port-invalid")
            raise InvalidPortError()

    # ------------------------------------------------------------------
    # File
    # ------------------------------------------------------------------

    def _file(self, char: str) -> None:
        self.record.scheme = "file"
        self.record.host = Host.empty()
        if char in ("/", "\\"):
            if char == "\\":
                self.validation_error("invalid-reverse-solidus")
            self.state = State.FILE_SLASH
        else:
            self.state = State.PATH
            self.pointer -= 1

    def _file_slash(self, char: str) -> None:
        if char in ("/", "\\"):
            if char == "\\":
                self.validation_error("invalid-reverse-solidus")
            self.state = State.FILE_HOST
        else:
            self.state = State.PATH
            self.pointer -= 1

    def _file_host(self, char: str) -> None:
        if char == EOF or char in ("/", "\\", "?", "#"):
            self.pointer -= 1
            if is_windows_drive_letter(self.buffer):
                # The drive letter stays in the buffer and becomes a path segment.
                self.validation_error("file-invalid-Windows-drive-letter-host")
                self.state = State.PATH
            elif self.buffer == "":
                self.record.host = Host.empty()
                self.state = State.PATH_START
            else:
                host = parse_host(self.buffer, False)
                if host.kind is HostKind.DOMAIN and host.value == "localhost":
                    host = Host.empty()
                self.record.host = host
                self.buffer = ""
                self.state = State.PATH_START
        else:
            self.buffer += char

    # ------------------------------------------------------------------
    # Path, query, fragment
    # ------------------------------------------------------------------

    def _path_start(self, char: str) -> None:
        record = self.record
        if record.is_special:
            if char == "\\":
                self.validation_error("invalid-reverse-solidus")
            self.state = State.PATH
            if char not in ("/", "\\"):
                self.pointer -= 1
        elif self.state_override is None and char == "?":
            record.query = ""
            self.state = State.QUERY
        elif self.state_override is None and char == "#":
            record.fragment = ""
            self.state = State.FRAGMENT
        elif char != EOF:
            self.state = State.PATH
            if char != "/":
                self.pointer -= 1
        elif self.state_override is not None and record.host is None:
            assert isinstance(record.path, list)
            record.path.append("")

    def _path(self, char: str) -> None:
        record = self.record
        path = record.path
        assert isinstance(path, list)

        if (
            char == EOF
            or self._is_slash(char)
            or (self.state_override is None and char in ("?", "#"))
        ):
            if char == "\\":
                self.validation_error("invalid-reverse-solidus")

            segment = self.buffer
            if segment.lower() in _DOUBLE_DOT_SEGMENTS:
                record.shorten_path()
                if not self._is_slash(char):
                    path.append("")
            elif segment.lower() in _SINGLE_DOT_SEGMENTS:
                if not self._is_slash(char):
                    path.append("")
            else:
                if (
                    record.scheme == "file"
                    and not path
                    and is_windows_drive_letter(segment)
                ):
                    segment = segment[0] + ":"
                path.append(segment)
            self.buffer = ""

            if char == "?":
                record.query = ""
                self.state = State.QUERY
            elif char == "#":
                record.fragment = ""
                self.state = State.FRAGMENT
        else:
            self.buffer += percent_encode(char, PATH_SET)

    def _opaque_path(self, char: str) -> None:
        record = self.record
        if char == "?":
            record.query = ""
            self.state = State.QUERY
        elif char == "#":
            record.fragment = ""
            self.state = State.FRAGMENT
        elif char != EOF:
            end = len(self.text)
            for terminator in ("?", "#"):
                found = self.text.find(terminator, self.pointer)
                if found != -1:
                    end = min(end, found)
            record.path = str(record.path) + percent_encode(
                self.text[self.pointer : end], C0_CONTROL_SET
            )
            self.pointer = end - 1

    def _query(self, char: str) -> None:
        record = self.record
        if char == "#":
            record.fragment = ""
            self.state = State.FRAGMENT
            return
        if char == EOF:
            return

        end = self.text.find("#", self.pointer)
        if end == -1:
            end = len(self.text)
        encode_set = SPECIAL_QUERY_SET if record.is_special else QUERY_SET
        record.query = (record.query or "") + percent_encode(
            self.text[self.pointer : end], encode_set
        )
        self.pointer = end - 1

    def _fragment(self, char: str) -> None:
        if char == EOF:
            return
        self.record.fragment = (self.record.fragment or "") + percent_encode(
            self.text[self.pointer :], FRAGMENT_SET
        )
        self.pointer = len(self.text) - 1


class UrlParser:
    """
    Absolute URL parser.

    Handles:
    - Scheme, credentials, host, port, path, query and fragment.
    - Special-scheme rules (default ports, backslashes, ``file`` quirks).
    - Percent-encoding normalization of every component.
    """

    def __init__(self, options: Optional[ParserOptions] = None):
        self.options = options or ParserOptions()

    def parse(self, text: str) -> UrlRecord:
        """
        Parse an absolute URL string.

        Returns:
            The normalized URL record.

        Raises:
            ParseError: One of its subclasses, carrying the diagnostic message.
        """
        max_length = self.options.max_input_length
        if max_length is not None and len(text) > max_length:
            raise InputTooLongError()

        text = to_scalar_values(text)
        trimmed = text.strip(_C0_CONTROL_OR_SPACE)
        if trimmed != text:
            logger.debug("URL validation error invalid-URL-unit in %r", text)
        cleaned = strip_tab_and_newline(trimmed)
        if cleaned != trimmed:
            logger.debug("URL validation error invalid-URL-unit in %r", text)

        return _StateMachine(cleaned, UrlRecord(), State.SCHEME_START).run()

    def parse_path(self, record: UrlRecord, value: str) -> None:
        """Replace the (non-opaque) path of ``record`` with ``value``."""
        assert not record.has_opaque_path
        record.path = []
        text = strip_tab_and_newline(to_scalar_values(value))
        _StateMachine(text, record, State.PATH_START, State.PATH_START).run()
