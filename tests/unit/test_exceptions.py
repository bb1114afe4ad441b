"""tests/unit/test_exceptions.py"""

import pytest

from weburl.exceptions import (
    EmptyHostError,
    EvaluationError,
    IdnaError,
    InputTooLongError,
    InvalidDomainCharacterError,
    InvalidIpv4AddressError,
    InvalidIpv6AddressError,
    InvalidPortError,
    OperationNotFoundError,
    PackageError,
    ParseError,
    RelativeUrlWithoutBaseError,
    WebUrlError,
)


def test_exception_hierarchy():
    """Verify the inheritance structure of WebURL exceptions."""
    assert issubclass(ParseError, WebUrlError)
    assert issubclass(ParseError, ValueError)
    assert issubclass(PackageError, WebUrlError)
    assert issubclass(EvaluationError, PackageError)
    assert issubclass(OperationNotFoundError, PackageError)
    for exception_class in (
        RelativeUrlWithoutBaseError,
        EmptyHostError,
        IdnaError,
        InvalidPortError,
        InvalidIpv4AddressError,
        InvalidIpv6AddressError,
        InvalidDomainCharacterError,
        InputTooLongError,
    ):
        assert issubclass(exception_class, ParseError)


@pytest.mark.parametrize(
    "exception_class, message",
    [
        (RelativeUrlWithoutBaseError, "relative URL without a base"),
        (EmptyHostError, "empty host"),
        (IdnaError, "invalid international domain name"),
        (InvalidPortError, "invalid port number"),
        (InvalidIpv4AddressError, "invalid IPv4 address"),
        (InvalidIpv6AddressError, "invalid IPv6 address"),
        (InvalidDomainCharacterError, "invalid domain character"),
        (InputTooLongError, "URLs more than 4 GB are not supported"),
    ],
)
def test_parse_error_default_messages(exception_class, message):
    """Verify that each parse failure carries its diagnostic by default."""
    with pytest.raises(exception_class) as exc_info:
        raise exception_class()
    assert str(exc_info.value) == message


def test_parse_error_custom_message():
    """Verify that ParseError accepts a custom message."""
    with pytest.raises(ParseError) as exc_info:
        raise ParseError("Custom failure")
    assert "Custom failure" in str(exc_info.value)


@pytest.mark.parametrize(
    "exception_class",
    [WebUrlError, PackageError, EvaluationError, OperationNotFoundError],
)
def test_generic_exceptions_accept_message(exception_class):
    """Verify that generic exceptions can be raised with a message."""
    message = f"Testing {exception_class.__name__}"
    with pytest.raises(exception_class) as exc_info:
        raise exception_class(message)
    assert message in str(exc_info.value)
