"""src/weburl/package/operations.py

Operation descriptors exposed to an embedding host.

Each canonical operation is defined once; alternate names are listed in
``ALIASES`` and resolve to the same callable.
"""

import enum
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from weburl.config import PackageOptions
from weburl.exceptions import EvaluationError, ParseError
from weburl.url import URL

__all__ = [
    "ALIASES",
    "Operation",
    "OperationKey",
    "OperationKind",
    "OperationTable",
    "build_operation_table",
]


class OperationKind(enum.Enum):
    """How the host invokes an operation."""

    FUNCTION = "function"
    GETTER = "getter"
    SETTER = "setter"


@dataclass(frozen=True)
class Operation:
    """
    One entry of the operation table.

    Attributes:
        name: Name the host calls.
        kind: Function call, property read or property write.
        arity: Positional arguments, receiver included.
        func: Implementation.
        doc: One-line description.
        canonical: Name of the canonical operation (itself unless an alias).
        takes_receiver: False only for the constructor.
    """

    name: str
    kind: OperationKind
    arity: int
    func: Callable[..., Any]
    doc: str = ""
    canonical: str = ""
    takes_receiver: bool = True

    @property
    def key(self) -> "OperationKey":
        return (self.kind, self.name, self.arity)

    @property
    def is_alias(self) -> bool:
        return self.canonical != self.name


OperationKey = Tuple[OperationKind, str, int]
OperationTable = Mapping[OperationKey, Operation]

ALIASES: Mapping[OperationKey, str] = MappingProxyType(
    {
        (OperationKind.FUNCTION, "query_delete", 1): "query_clear",
        (OperationKind.FUNCTION, "query_remove", 1): "query_clear",
        (OperationKind.FUNCTION, "query_remove", 2): "query_delete",
        (OperationKind.FUNCTION, "query_getAll", 2): "query_gets",
        (OperationKind.FUNCTION, "to_debug", 1): "to_string",
        (OperationKind.GETTER, "hash", 1): "fragment",
        (OperationKind.SETTER, "hash", 2): "fragment",
    }
)


def _new(url: str, options: PackageOptions) -> URL:
    try:
        return URL(url, options.parser)
    except ParseError as exc:
        raise EvaluationError(str(exc)) from exc


def _set_scheme(url: URL, value: str) -> None:
    # A refused scheme change is not reported to the host.
    url.set_scheme(value)


def _set_fragment(url: URL, value: Optional[str], options: PackageOptions) -> None:
    if value is None and options.fragment_none_clears_query:
        url.set_query(None)
    else:
        url.set_fragment(value)


def _canonical_operations(options: PackageOptions) -> List[Operation]:
    function = OperationKind.FUNCTION
    getter = OperationKind.GETTER
    setter = OperationKind.SETTER
    return [
        Operation(
            "Url",
            function,
            1,
            lambda url: _new(url, options),
            "Creates a new Url.",
            takes_receiver=False,
        ),
        Operation("href", getter, 1, lambda url: url.href, "Full URL."),
        Operation("scheme", getter, 1, lambda url: url.scheme, "Url scheme."),
        Operation("scheme", setter, 2, _set_scheme, "Sets the Url scheme."),
        Operation("domain", getter, 1, lambda url: url.domain, "Url domain."),
        Operation("path", getter, 1, lambda url: url.path, "Url path."),
        Operation("path", setter, 2, URL.set_path, "Sets the Url path."),
        Operation("query", getter, 1, lambda url: url.query, "Url query string."),
        Operation("query", setter, 2, URL.set_query, "Sets the Url query string."),
        Operation("fragment", getter, 1, lambda url: url.fragment, "Url fragment."),
        Operation(
            "fragment",
            setter,
            2,
            lambda url, value: _set_fragment(url, value, options),
            "Sets the Url fragment.",
        ),
        Operation("query_clear", function, 1, URL.query_clear, "Removes the query."),
        Operation(
            "query_delete",
            function,
            2,
            URL.query_delete,
            "Removes every query pair with the given key.",
        ),
        Operation(
            "query_append", function, 3, URL.query_append, "Appends a query pair."
        ),
        Operation(
            "query_set",
            function,
            3,
            URL.query_set,
            "Replaces all pairs of a key with one pair at the end.",
        ),
        Operation(
            "query_get",
            function,
            2,
            URL.query_get,
            "First value for a key, or an empty string.",
        ),
        Operation(
            "query_gets", function, 2, URL.query_gets, "All values for a key."
        ),
        Operation("to_string", function, 1, URL.to_string, "Full URL."),
    ]


def build_operation_table(options: Optional[PackageOptions] = None) -> OperationTable:
    """
    Build the immutable operation table.

    Args:
        options: Package configuration; defaults apply when omitted.

    Returns:
        Read-only mapping from ``(kind, name, arity)`` to descriptors,
        aliases included.
    """
    options = options or PackageOptions()
    table: Dict[OperationKey, Operation] = {}

    for operation in _canonical_operations(options):
        table[operation.key] = replace(operation, canonical=operation.name)

    for (kind, name, arity), canonical in ALIASES.items():
        target = table[(kind, canonical, arity)]
        table[(kind, name, arity)] = replace(target, name=name, canonical=canonical)

    return MappingProxyType(table)
