"""
slotledger.backends.polars
==========================

In-memory Polars journal (`ledger`) and its sinks and sources (`io`).
"""
