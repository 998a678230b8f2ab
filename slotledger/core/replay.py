"""
slotledger.core.replay
======================

Rebuild contract state from its journal.

The journal is the contract's history: a gate row for the single
initialization, and one slot row per merged contribution. Folding those rows
in journal order gives back the live contract's state. Call-outcome rows are
informational and ignored here.

Examples
--------
>>> from slotledger.backends.polars.ledger import PolarsJournal
>>> from slotledger.core.contract import AccumulatorContract
>>> from slotledger.core.replay import replay_contract
>>> J = PolarsJournal()
>>> live = AccumulatorContract("ST1.acc", journal=J)
>>> _ = live.initialize("ST1", 1)
>>> _ = live.set_values([1, 2], "ST2", 2)
>>> _ = live.set_values([1, 2], "ST3", 3)
>>> replay_contract(J, "ST1.acc").state() == live.state()
True
"""

from __future__ import annotations
import logging
from typing import Optional

from slotledger.core.accumulator import SlotMerge
from slotledger.core.config import ContractConfig
from slotledger.core.contract import AccumulatorContract
from slotledger.core.names import Namespace
from slotledger.core.traits import JournalOps

logger = logging.getLogger(__name__)


class ReplayError(RuntimeError):
    """The journal does not describe a valid contract history."""


def replay_contract(
    journal: JournalOps,
    identifier: str,
    config: Optional[ContractConfig] = None,
) -> AccumulatorContract:
    """Return a fresh, journal-less contract holding the replayed state.

    Raises
    ------
    ReplayError
        If the journal initializes the contract twice, merges into slots before
        initialization, or records a merge whose total disagrees with the
        replayed slot.
    """
    contract = AccumulatorContract(identifier, config=config)
    init_seq: Optional[int] = None
    for row in journal.iter_ns(namespace=Namespace.GATE, entity=identifier, kind="initialized"):
        if init_seq is not None:
            raise ReplayError(f"{identifier}: initialized twice (rows {init_seq} and {row.seq})")
        init_seq = row.seq
        contract.gate.initialize(row.sender)

    merged = 0
    for row in journal.iter_ns(namespace=Namespace.SLOTS, entity=identifier, kind="merged"):
        m = row.payload
        if not isinstance(m, SlotMerge):
            raise ReplayError(f"{identifier}: row {row.seq} has payload {row.payload_type}")
        if init_seq is None or row.seq < init_seq:
            raise ReplayError(f"{identifier}: merge at row {row.seq} precedes initialization")
        planned = contract.ledger.plan([m.contribution], m.height)
        if planned[0].total != m.total:
            raise ReplayError(
                f"{identifier}: slot {m.height} replays to {planned[0].total}, journal says {m.total}"
            )
        contract.ledger.apply(planned)
        merged += 1

    logger.info("replayed %s: %d merges into %d slots", identifier, merged, len(contract.ledger))
    return contract
