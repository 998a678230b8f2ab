"""
slotledger.core.names
=====================

Typed names shared across the package.

- `Namespace`: an Enum for the journal namespaces.
- `ErrorKind`: the fixed error codes surfaced at the contract boundary.
- `BlockHeight`, `Value`, `Principal`, `ContractId`: NewType wrappers for clarity.

Examples
--------
>>> from slotledger.core.names import Namespace, ErrorKind, BlockHeight
>>> Namespace.SLOTS.value
'slots'
>>> int(ErrorKind.NOT_AUTHORIZED)
1001
>>> h = BlockHeight(7); isinstance(h, int)
True
"""

from __future__ import annotations
from enum import Enum, IntEnum
from typing import Literal, NewType


class Namespace(str, Enum):
    """Journal namespaces.

    - GATE: initialization gate transitions
    - SLOTS: per-slot additive merges
    - CALLS: outcome of every contract call (committed or rejected)
    """

    GATE = "gate"
    SLOTS = "slots"
    CALLS = "calls"

    def __str__(self) -> str:
        return self.value


class ErrorKind(IntEnum):
    """Error codes returned inside ``err(...)`` responses.

    ``NOT_AUTHORIZED`` covers both re-initialization and writes attempted
    before initialization.
    """

    NOT_AUTHORIZED = 1001
    OVERFLOW = 1002


# Thin wrappers over int/str for logical identifiers.
BlockHeight = NewType("BlockHeight", int)
Value = NewType("Value", int)
Principal = NewType("Principal", str)
ContractId = NewType("ContractId", str)

# Upper bound of the unsigned 128-bit value domain.
U128_MAX = (1 << 128) - 1

# Highest block height the journal can store (signed 64-bit column).
MAX_BLOCK_HEIGHT = (1 << 63) - 1

# Event kinds written to the journal.
GateKind = Literal["initialized"]
SlotKind = Literal["merged"]
CallKind = Literal["ok", "err"]
