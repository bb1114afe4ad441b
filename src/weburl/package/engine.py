"""src/weburl/package/engine.py

Dispatcher that lets an embedding host invoke URL operations by name.
"""

import logging
from typing import Any, List, MutableMapping, Optional

from weburl.config import PackageOptions
from weburl.exceptions import EvaluationError, OperationNotFoundError
from weburl.package.operations import (
    Operation,
    OperationKey,
    OperationKind,
    OperationTable,
    build_operation_table,
)
from weburl.url import URL

__all__ = ["UrlPackage"]

logger = logging.getLogger(__name__)


class UrlPackage:
    """
    URL operations bundled for a host.

    The operation table is built once and never changes; hosts either call
    through this object or copy the descriptors with :meth:`register_into`.

    Attributes:
        options: Package configuration.
        operations: Read-only operation table.
    """

    __slots__ = ("options", "operations")

    def __init__(self, options: Optional[PackageOptions] = None) -> None:
        self.options = options or PackageOptions()
        self.operations: OperationTable = build_operation_table(self.options)

    def register_into(self, registry: MutableMapping[OperationKey, Operation]) -> int:
        """
        Copy every descriptor into a host-owned registry.

        Returns:
            Number of descriptors registered.
        """
        registry.update(self.operations)
        return len(self.operations)

    def functions(self) -> List[str]:
        """Sorted names of the canonical function operations."""
        return sorted(
            {
                operation.name
                for operation in self.operations.values()
                if operation.kind is OperationKind.FUNCTION and not operation.is_alias
            }
        )

    def lookup(self, kind: OperationKind, name: str, arity: int) -> Operation:
        """
        Find the descriptor for ``name`` called with ``arity`` arguments.

        Raises:
            OperationNotFoundError: If nothing is registered under that key.
        """
        operation = self.operations.get((kind, name, arity))
        if operation is None:
            raise OperationNotFoundError(
                f"{kind.value} not found: {name} with {arity} argument(s)"
            )
        return operation

    def call(self, name: str, *args: Any) -> Any:
        """Invoke a function operation (``Url``, ``query_set``, ...)."""
        return self._invoke(self.lookup(OperationKind.FUNCTION, name, len(args)), args)

    def get(self, target: Any, name: str) -> Any:
        """Read a property such as ``href`` or ``hash``."""
        return self._invoke(self.lookup(OperationKind.GETTER, name, 1), (target,))

    def set(self, target: Any, name: str, value: Any) -> None:
        """Write a property such as ``scheme`` or ``query``."""
        self._invoke(self.lookup(OperationKind.SETTER, name, 2), (target, value))

    def _invoke(self, operation: Operation, args: Any) -> Any:
        if operation.takes_receiver and not isinstance(args[0], URL):
            raise EvaluationError(
                f"{operation.name} expects a Url, got {type(args[0]).__name__}"
            )
        logger.debug(
            "Invoking %s %s/%d", operation.kind.value, operation.name, len(args)
        )
        return operation.func(*args)
