"""
slotledger.core.errors
======================

Exceptions raised inside the contract when a precondition is violated.

Entry points catch `ContractError` and turn it into ``Response.err(kind)``;
callers of the public API therefore only see typed results. The exceptions
remain useful for code composing the core components directly.

Examples
--------
>>> from slotledger.core.errors import NotAuthorizedError
>>> from slotledger.core.names import ErrorKind
>>> NotAuthorizedError("already initialized").kind is ErrorKind.NOT_AUTHORIZED
True
"""

from __future__ import annotations

from slotledger.core.names import ErrorKind


class ContractError(Exception):
    """Base class for contract-level failures that carry an error code."""

    kind: ErrorKind

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind.name.lower())


class NotAuthorizedError(ContractError):
    """A one-way precondition of the initialization gate was violated."""

    kind = ErrorKind.NOT_AUTHORIZED


class ValueOverflowError(ContractError):
    """An additive merge would exceed the value domain."""

    kind = ErrorKind.OVERFLOW

    def __init__(self, height: int, current: int, contribution: int, limit: int):
        self.height = height
        self.current = current
        self.contribution = contribution
        self.limit = limit
        super().__init__(
            f"slot {height}: {current} + {contribution} exceeds {limit}"
        )


class ResultAssertionError(AssertionError):
    """Raised by the ``expect_*`` helpers when a result does not match."""
