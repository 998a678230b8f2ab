"""
slotledger.core.traits
======================

Trait (mixin) that attaches a small, typed DSL to any journal backend.

This mixin assumes the host implements `LedgerBase.append`,
`LedgerBase.reader` and the `table` property. By inheriting `JournalOps`, concrete journals gain:

- `write_event()` : append a record with typed parameters
- `record_initialized()` / `record_merges()` / `record_call()` : the three
  contract transitions, with their payload types
- `latest()` / `iter_ns()` : typed convenience readers

Examples
--------
>>> from slotledger.backends.polars.ledger import PolarsJournal
>>> from slotledger.core.names import Namespace
>>> J = PolarsJournal()
>>> J.record_initialized(entity="ST1.acc", sender="ST1", block_height=1)
>>> J.latest(namespace=Namespace.GATE).kind
'initialized'
"""

from __future__ import annotations
from abc import abstractmethod
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Union

from slotledger.core.accumulator import SlotMerge
from slotledger.core.ledger import (
    JSONPayloadType,
    LedgerBase,
    NamespaceLike,
    PayloadTypeRegistry,
    Row,
    namespace_str,
)
from slotledger.core.names import BlockHeight, Namespace, Value
from slotledger.core.result import Response

if TYPE_CHECKING:
    import ibis

SLOT_MERGE = "SlotMerge"
GATE_TRANSITION = "GateTransition"
CALL_OUTCOME = "CallOutcome"


class SlotMergePayload(JSONPayloadType):
    """Round-trips `SlotMerge` through JSON."""

    def wrap(self, data: Any) -> str:
        if isinstance(data, SlotMerge):
            data = {
                "height": int(data.height),
                "contribution": int(data.contribution),
                "previous": None if data.previous is None else int(data.previous),
                "total": int(data.total),
            }
        return super().wrap(data)

    def unwrap(self, json_str: str) -> SlotMerge:
        d = super().unwrap(json_str)
        return SlotMerge(
            height=BlockHeight(int(d["height"])),
            contribution=Value(int(d["contribution"])),
            previous=None if d.get("previous") is None else Value(int(d["previous"])),
            total=Value(int(d["total"])),
        )


PayloadTypeRegistry.register(SLOT_MERGE, SlotMergePayload())


class JournalOps(LedgerBase):
    """A trait that attaches a small, typed DSL onto a journal backend."""

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @property
    @abstractmethod
    def table(self) -> ibis.Table:
        """The journal as an ibis table expression, for reporting."""

    # ---- writers ----

    def write_event(
        self,
        *,
        block_height: int,
        namespace: NamespaceLike,
        kind: str,
        entity: str,
        sender: str,
        payload_type: str,
        payload: Any,
        tag: Optional[str] = None,
        ts: Optional[datetime] = None,
    ) -> None:
        """Append a typed event to the journal."""
        self.append(
            block_height=int(block_height),
            ts=ts or self._now(),
            namespace=namespace_str(namespace),
            kind=kind,
            entity=str(entity),
            sender=str(sender),
            payload_type=payload_type,
            payload=payload,
            tag=tag,
        )

    def record_initialized(self, *, entity: str, sender: str, block_height: int) -> None:
        self.write_event(
            block_height=block_height,
            namespace=Namespace.GATE,
            kind="initialized",
            entity=entity,
            sender=sender,
            payload_type=GATE_TRANSITION,
            payload={"from": "uninitialized", "to": "initialized"},
            tag="gate",
        )

    def record_merges(
        self,
        *,
        entity: str,
        sender: str,
        block_height: int,
        merges: Iterable[SlotMerge],
    ) -> None:
        for m in merges:
            self.write_event(
                block_height=block_height,
                namespace=Namespace.SLOTS,
                kind="merged",
                entity=entity,
                sender=sender,
                payload_type=SLOT_MERGE,
                payload=m,
                tag=f"slot:{int(m.height)}",
            )

    def record_call(
        self,
        *,
        entity: str,
        sender: str,
        block_height: int,
        function: str,
        response: Response,
        args: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.write_event(
            block_height=block_height,
            namespace=Namespace.CALLS,
            kind="ok" if response.is_ok else "err",
            entity=entity,
            sender=sender,
            payload_type=CALL_OUTCOME,
            payload={"function": function, "result": response.value, "args": args or {}},
            tag=function,
        )

    # ---- readers ----

    def latest(
        self,
        *,
        namespace: Optional[NamespaceLike] = None,
        kind: Optional[str] = None,
        entity: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Optional[Row]:
        """Return latest row for given filters (or None)."""
        return self.reader().latest(
            namespace=namespace_str(namespace) if namespace is not None else None,
            kind=kind,
            entity=entity,
            tag=tag,
        )

    def iter_ns(
        self,
        *,
        namespace: NamespaceLike,
        entity: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> Iterable[Row]:
        """Iterate rows in a namespace (optionally filtered by contract and kind)."""
        return self.reader().iter_rows(
            namespace=namespace_str(namespace), entity=entity, kind=kind
        )

    def count(self, **filters: Union[str, None]) -> int:
        if filters.get("namespace") is not None:
            filters["namespace"] = namespace_str(filters["namespace"])
        return self.reader().count(**filters)
