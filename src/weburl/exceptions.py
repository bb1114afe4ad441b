"""src/weburl/exceptions.py

WebURL Exceptions hierarchy.
"""


class WebUrlError(Exception):
    """Base exception for all WebURL errors."""


class ParseError(WebUrlError, ValueError):
    """
    Input could not be parsed as an absolute URL.
    The message is the parser's diagnostic.
    """

    default_message = "invalid URL"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class RelativeUrlWithoutBaseError(ParseError):
    """Input has no scheme (relative URLs need a base, which is never given)."""

    default_message = "relative URL without a base"


class EmptyHostError(ParseError):
    """A host is required but missing."""

    default_message = "empty host"


class IdnaError(ParseError):
    """Domain-to-ASCII processing failed."""

    default_message = "invalid international domain name"


class InvalidPortError(ParseError):
    """Port is not a decimal number or is out of range."""

    default_message = "invalid port number"


class InvalidIpv4AddressError(ParseError):
    """Host ends in a number but is not a valid IPv4 address."""

    default_message = "invalid IPv4 address"


class InvalidIpv6AddressError(ParseError):
    """Bracketed host is not a valid IPv6 address."""

    default_message = "invalid IPv6 address"


class InvalidDomainCharacterError(ParseError):
    """Host contains a forbidden code point."""

    default_message = "invalid domain character"


class InputTooLongError(ParseError):
    """Input exceeds the configured maximum length."""

    default_message = "URLs more than 4 GB are not supported"


class PackageError(WebUrlError):
    """Base exception for errors raised across the host boundary."""


class EvaluationError(PackageError):
    """
    An operation failed while being evaluated for the host.
    Wraps parse failures and wrong receiver types.
    """


class OperationNotFoundError(PackageError):
    """No operation is registered under the requested name and arity."""
