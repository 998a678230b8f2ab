"""
slotledger.core.result
======================

Typed values crossing the contract boundary.

- `Response`: the success/failure discriminator returned by public functions.
  ``ok`` wraps the payload (a bool here), ``err`` wraps an `ErrorKind` code.
- `OptionalValue`: the some/none result of read-only lookups.
- `Expectation`: the unwrapped inner value, with typed assertions.

The ``expect_*`` helpers chain the way receipts are checked in tests and raise
`ResultAssertionError` on mismatch.

Examples
--------
>>> from slotledger.core.result import Response, OptionalValue
>>> from slotledger.core.names import ErrorKind
>>> Response.ok(True).expect_ok().expect_bool(True)
True
>>> Response.err(ErrorKind.OVERFLOW).expect_err().expect_uint(1002)
1002
>>> OptionalValue.some(5).expect_some().expect_uint(5)
5
>>> OptionalValue.none().is_some
False
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Union

from slotledger.core.errors import ResultAssertionError
from slotledger.core.names import ErrorKind


@dataclass(frozen=True)
class Expectation:
    """An unwrapped inner value that can be asserted on."""

    value: Any

    def expect_bool(self, expected: bool) -> bool:
        if not isinstance(self.value, bool):
            raise ResultAssertionError(f"expected bool, got {self.value!r}")
        if self.value is not expected:
            raise ResultAssertionError(f"expected {expected}, got {self.value}")
        return self.value

    def expect_uint(self, expected: int) -> int:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ResultAssertionError(f"expected uint, got {self.value!r}")
        if self.value < 0:
            raise ResultAssertionError(f"expected uint, got negative {self.value}")
        if self.value != expected:
            raise ResultAssertionError(f"expected u{expected}, got u{self.value}")
        return int(self.value)


@dataclass(frozen=True)
class Response:
    """Result of a public contract function."""

    is_ok: bool
    value: Any

    @classmethod
    def ok(cls, value: Any) -> "Response":
        return cls(is_ok=True, value=value)

    @classmethod
    def err(cls, kind: Union[ErrorKind, int]) -> "Response":
        return cls(is_ok=False, value=int(kind))

    @property
    def is_err(self) -> bool:
        return not self.is_ok

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        """The `ErrorKind` of an ``err`` response, or None for ``ok``."""
        if self.is_ok:
            return None
        try:
            return ErrorKind(self.value)
        except ValueError:
            return None

    def expect_ok(self) -> Expectation:
        if not self.is_ok:
            raise ResultAssertionError(f"expected ok, got (err u{self.value})")
        return Expectation(self.value)

    def expect_err(self) -> Expectation:
        if self.is_ok:
            raise ResultAssertionError(f"expected err, got (ok {self.value!r})")
        return Expectation(self.value)

    def __str__(self) -> str:
        inner = str(self.value).lower() if isinstance(self.value, bool) else f"u{self.value}"
        return f"({'ok' if self.is_ok else 'err'} {inner})"


@dataclass(frozen=True)
class OptionalValue:
    """Result of a read-only lookup: ``some(value)`` or ``none``."""

    value: Optional[Any] = None

    @classmethod
    def some(cls, value: Any) -> "OptionalValue":
        if value is None:
            raise ValueError("some() requires a value")
        return cls(value)

    @classmethod
    def none(cls) -> "OptionalValue":
        return cls(None)

    @classmethod
    def of(cls, value: Optional[Any]) -> "OptionalValue":
        return cls(value)

    @property
    def is_some(self) -> bool:
        return self.value is not None

    def expect_some(self) -> Expectation:
        if self.value is None:
            raise ResultAssertionError("expected some, got none")
        return Expectation(self.value)

    def expect_none(self) -> None:
        if self.value is not None:
            raise ResultAssertionError(f"expected none, got (some u{self.value})")

    def __str__(self) -> str:
        return "none" if self.value is None else f"(some u{self.value})"
