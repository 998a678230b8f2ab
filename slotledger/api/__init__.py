"""
slotledger.api - Contract Models
================================

Typed facades over deployed contracts. A model turns Python calls into
transactions (to be mined by `slotledger.runtime.chain.Chain`) and read-only
lookups, and names the contract's error codes.

Examples
--------
>>> from slotledger.runtime.context import Context
>>> from slotledger.api.accumulator import AccumulatorModel
>>> ctx = Context()
>>> acc = ctx.models.get(AccumulatorModel)
>>> tx = acc.set_values([1, 2, 3], ctx.accounts.get("wallet_5"))
>>> tx.function
'set-values'

Architecture
------------
- slotledger.core: the contract, its gate and accumulator, results, journal DSL
- slotledger.runtime: chain, accounts, session context
- slotledger.backends: journal storage (ibis, Polars)
- slotledger.reporting: journal summaries
"""
