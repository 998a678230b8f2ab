"""
slotledger — a scheduled value accumulator behind a one-shot initialization gate.

A tiny stateful contract is the heart of this package. It refuses every write
until it has been initialized exactly once, and from then on it accepts numeric
sequences that are spread *forward* over block heights: the i-th value of a
submission lands in the slot ``current_height + i``. Slots are merged by
addition, so any number of submissions that share a block produce the same
ledger no matter in which order the block producer applied them.

Around that core the package ships the collaborators needed to drive it:
a simulated chain that mines blocks of transactions, named accounts, a typed
contract model, an append-only journal of every committed transition (ibis or
Polars backed), replay from that journal, and a small reporter.

Example
-------
>>> import slotledger
>>> from slotledger.runtime.context import Context
>>> from slotledger.api.accumulator import AccumulatorModel
>>> ctx = Context()
>>> model = ctx.models.get(AccumulatorModel)
>>> _ = ctx.chain.mine_block([model.initialize(ctx.deployer)])
>>> block = ctx.chain.mine_block([model.set_values([1, 2, 3], ctx.deployer)])
>>> block.receipts[0].result.expect_ok().expect_bool(True)
True
>>> model.get_value(block.height + 1).expect_some().expect_uint(2)
2
"""

from slotledger.__version__ import __version__

__all__ = ["__version__"]
