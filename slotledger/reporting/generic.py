"""
slotledger.reporting.generic
============================

A contract-agnostic reporter over a journal: namespace x kind counts,
calls per block, senders, and the per-slot totals reconstructed from merges.
Works with any journal exposing an ibis ``table`` (`IbisJournal`,
`PolarsJournal`).

Examples
--------
>>> from slotledger.runtime.context import Context
>>> from slotledger.api.accumulator import AccumulatorModel
>>> from slotledger.reporting.generic import JournalReporter
>>> ctx = Context()
>>> acc = ctx.models.get(AccumulatorModel)
>>> _ = ctx.chain.mine_block([acc.initialize(ctx.deployer)])
>>> _ = ctx.chain.mine_block([acc.set_values([1, 2], ctx.deployer)] * 2)
>>> JournalReporter(ctx.journal).slot_totals()
{2: 2, 3: 4}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import ibis

from slotledger.core.names import Namespace

if TYPE_CHECKING:
    from slotledger.core.traits import JournalOps


@dataclass
class JournalReporter:
    """
    A generic reporter for any contract journal.
    Aggregations run as ibis expressions; payload decoding goes through the
    journal's reader.
    """

    journal: "JournalOps"
    entity: Optional[str] = None

    def journal_table(self) -> Any:
        """Return the journal table as ibis expression, restricted to ``entity``."""
        table = self.journal.table
        if self.entity is not None:
            table = table.filter(table.entity == self.entity)
        return table

    def unique_senders(self) -> List[str]:
        table = self.journal_table()
        df = table.select(table.sender).distinct().execute()
        return sorted(s for s in df["sender"].tolist() if s)

    def namespace_kind_counts(self) -> Any:
        """
        Return counts of events grouped by namespace and kind.

        Returns
        -------
        pandas.DataFrame
            Frame with namespace, kind, and count columns
        """
        table = self.journal_table()
        return (
            table.group_by(["namespace", "kind"])
            .aggregate(count=ibis._.count())
            .order_by(["namespace", "kind"])
            .execute()
        )

    def calls_per_block(self) -> Dict[int, int]:
        """Number of contract calls (committed or rejected) in each block."""
        table = self.journal_table()
        calls = table.filter(table.namespace == Namespace.CALLS.value)
        df = (
            calls.group_by("block_height")
            .aggregate(n=ibis._.count())
            .order_by("block_height")
            .execute()
        )
        return {int(h): int(n) for h, n in zip(df["block_height"], df["n"])}

    def rejected_calls(self) -> List[Dict[str, Any]]:
        return [
            {"block_height": row.block_height, "sender": row.sender, **row.payload}
            for row in self.journal.iter_ns(
                namespace=Namespace.CALLS, entity=self.entity, kind="err"
            )
        ]

    def slot_totals(self) -> Dict[int, int]:
        """Per-slot sums of every merged contribution, keyed by height."""
        totals: Dict[int, int] = {}
        for row in self.journal.iter_ns(
            namespace=Namespace.SLOTS, entity=self.entity, kind="merged"
        ):
            m = row.payload
            totals[int(m.height)] = totals.get(int(m.height), 0) + int(m.contribution)
        return dict(sorted(totals.items()))

    def summary(self) -> Dict[str, Any]:
        gate = self.journal.latest(namespace=Namespace.GATE, entity=self.entity)
        return {
            "initialized": gate is not None,
            "initialized_at": gate.block_height if gate is not None else None,
            "calls": sum(self.calls_per_block().values()),
            "rejected": len(self.rejected_calls()),
            "slots": len(self.slot_totals()),
        }
