"""src/weburl/package/__init__.py

Host integration for WebURL.

This module exposes the URL operations as an immutable table of named
descriptors, plus a small dispatcher for hosts that invoke operations by
name with positional arguments.
"""

from .engine import UrlPackage
from .operations import (
    ALIASES,
    Operation,
    OperationKind,
    OperationTable,
    build_operation_table,
)

__all__ = [
    "UrlPackage",
    "Operation",
    "OperationKind",
    "OperationTable",
    "ALIASES",
    "build_operation_table",
]
