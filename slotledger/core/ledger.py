"""
slotledger.core.ledger
======================

Backend-neutral building blocks of the call journal.

Every committed contract transition (gate flip, slot merge, call outcome) is
appended to an append-only journal as a typed row. This module defines what a
row looks like and how payloads are wrapped to and from JSON text; concrete
storage lives in `slotledger.backends` (ibis and Polars).

- `Row`: one journal record
- `LedgerReader`: read-only, filterable view over a journal
- `LedgerBase`: the append/reader contract implemented by backends
- `PayloadTypeRegistry`: type-based wrap/unwrap of payloads

Examples
--------
>>> from slotledger.core.ledger import PayloadTypeRegistry
>>> PayloadTypeRegistry.wrap("Anything", {"height": 2, "total": 3})
'{"height":2,"total":3}'
>>> PayloadTypeRegistry.unwrap("Anything", '{"height":2}')
{'height': 2}
"""

from __future__ import annotations
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Union

from slotledger.core.names import Namespace

# Type aliases
NamespaceLike = Union[Namespace, str]

# Column order shared by every backend.
JOURNAL_COLUMNS: List[str] = [
    "uuid",
    "ledger_name",
    "seq",
    "block_height",
    "ts",
    "namespace",
    "kind",
    "entity",
    "sender",
    "tag",
    "payload_type",
    "payload",
    "slotledger_version",
]


def namespace_str(namespace: NamespaceLike) -> str:
    return namespace.value if isinstance(namespace, Namespace) else str(namespace)


@dataclass(frozen=True)
class Row:
    """A single journal record with its payload already unwrapped."""

    uuid: str
    ledger_name: str
    seq: int
    block_height: int
    ts: datetime
    namespace: str
    kind: str
    entity: str
    sender: str
    tag: str
    payload_type: str
    payload: Any
    slotledger_version: str


class PayloadType(ABC):
    """Abstract base class for payload type handlers."""

    @abstractmethod
    def wrap(self, data: Any) -> str:
        """Convert data to JSON string for storage."""

    @abstractmethod
    def unwrap(self, json_str: str) -> Any:
        """Convert JSON string back to data."""


class JSONPayloadType(PayloadType):
    """Default JSON payload type handler."""

    def wrap(self, data: Any) -> str:
        return json.dumps(data, separators=(",", ":"), sort_keys=True)

    def unwrap(self, json_str: str) -> Any:
        return json.loads(json_str) if json_str else {}


class PayloadTypeRegistry:
    """Registry for payload type handlers."""

    _handlers: Dict[str, PayloadType] = {}
    _default_handler = JSONPayloadType()

    @classmethod
    def register(cls, payload_type: str, handler: PayloadType) -> None:
        cls._handlers[payload_type] = handler

    @classmethod
    def get_handler(cls, payload_type: str) -> PayloadType:
        """Get handler for payload type, fallback to default JSON handler."""
        return cls._handlers.get(payload_type, cls._default_handler)

    @classmethod
    def wrap(cls, payload_type: str, data: Any) -> str:
        return cls.get_handler(payload_type).wrap(data)

    @classmethod
    def unwrap(cls, payload_type: str, json_str: str) -> Any:
        return cls.get_handler(payload_type).unwrap(json_str)


class LedgerReader(ABC):
    """Read-only access to journal rows, oldest first."""

    @abstractmethod
    def iter_rows(
        self,
        *,
        namespace: Optional[NamespaceLike] = None,
        kind: Optional[str] = None,
        entity: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Iterator[Row]:
        ...

    @abstractmethod
    def latest(
        self,
        *,
        namespace: Optional[NamespaceLike] = None,
        kind: Optional[str] = None,
        entity: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Optional[Row]:
        ...

    @abstractmethod
    def count(self, **filters: Any) -> int:
        ...


class LedgerBase(ABC):
    """Minimal storage contract a journal backend implements."""

    ledger_name: str

    @abstractmethod
    def append(
        self,
        *,
        block_height: int,
        ts: datetime,
        namespace: NamespaceLike,
        kind: str,
        entity: str,
        sender: str,
        payload_type: str,
        payload: Any,
        tag: Optional[str] = None,
    ) -> "LedgerBase":
        ...

    @abstractmethod
    def reader(self) -> LedgerReader:
        ...
