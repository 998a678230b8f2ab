"""
slotledger.api.accumulator
==========================

Typed model of the accumulator contract.

Examples
--------
>>> from slotledger.runtime.context import Context
>>> from slotledger.api.accumulator import AccumulatorModel
>>> ctx = Context()
>>> acc = ctx.models.get(AccumulatorModel)
>>> _ = ctx.chain.mine_block([acc.initialize(ctx.deployer)])
>>> receipt = ctx.chain.mine_block([acc.initialize(ctx.deployer)]).receipts[0]
>>> receipt.result.expect_err().expect_uint(AccumulatorModel.Err.ERR_NOT_AUTHORIZED)
1001
"""

from __future__ import annotations
from enum import IntEnum
from typing import Iterable

from slotledger.api.model import Model, SenderLike
from slotledger.core.names import ErrorKind
from slotledger.core.result import OptionalValue
from slotledger.runtime.chain import Tx


class AccumulatorModel(Model):
    """Transactions and lookups for `AccumulatorContract`."""

    class Err(IntEnum):
        ERR_NOT_AUTHORIZED = int(ErrorKind.NOT_AUTHORIZED)
        ERR_OVERFLOW = int(ErrorKind.OVERFLOW)

    def initialize(self, sender: SenderLike) -> Tx:
        return self.call_public("initialize", [], sender)

    def set_values(self, values: Iterable[int], sender: SenderLike) -> Tx:
        return self.call_public("set-values", [tuple(values)], sender)

    def get_value(self, height: int) -> OptionalValue:
        return self.call_read_only("get-value", [height])
