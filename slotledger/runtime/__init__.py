"""
slotledger.runtime
==================

The simulated environment that drives the contract.

This namespace contains the execution infrastructure: the block producer that
owns the block height, the named accounts that sign transactions, and the
session context that deploys a contract and hands out models.

Key Components
--------------
- `Chain`: mines blocks of transactions at a monotonically advancing height
- `Accounts`: deployer and wallet principals
- `Context`: one chain, one deployed contract, one journal, the model registry

Examples
--------
>>> from slotledger.runtime.context import Context
>>> from slotledger.api.accumulator import AccumulatorModel
>>> ctx = Context()
>>> acc = ctx.models.get(AccumulatorModel)
>>> block = ctx.chain.mine_block([acc.initialize(ctx.accounts.get("wallet_4"))])
>>> block.receipts[0].result.expect_ok().expect_bool(True)
True
"""
