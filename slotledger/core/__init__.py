"""
slotledger.core
===============

The contract and its building blocks: the initialization gate, the scheduled
accumulator, typed results and errors, configuration, and the journal DSL
(`JournalOps`) with replay.
"""
