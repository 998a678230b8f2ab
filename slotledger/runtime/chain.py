"""
slotledger.runtime.chain
========================

A minimal block producer that drives deployed contracts.

The chain owns the block height. `Chain.mine_block` runs the block's
transactions one after another at the current height, collects one `Receipt`
per transaction, and only then advances the height. Contracts never see the
block boundaries; they only receive the height of the block they run in.

All transactions of a block are checked (target contract, function name,
arguments) before the first one executes, so a malformed block is refused as
a whole and the height does not move.

Examples
--------
>>> from slotledger.core.contract import AccumulatorContract
>>> from slotledger.runtime.chain import Chain, Tx
>>> chain = Chain()
>>> chain.deploy(AccumulatorContract("ST1.acc"))
>>> block = chain.mine_block([Tx("ST1.acc", "initialize", (), "ST1")])
>>> block.height, chain.block_height
(1, 2)
>>> str(block.receipts[0].result)
'(ok true)'
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from slotledger.core.contract import AccumulatorContract
from slotledger.core.result import OptionalValue, Response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tx:
    """A contract call waiting to be mined."""

    contract: str
    function: str
    args: Tuple[Any, ...]
    sender: str


@dataclass(frozen=True)
class Receipt:
    tx: Tx
    result: Response
    block_height: int
    index: int


@dataclass(frozen=True)
class Block:
    height: int
    receipts: List[Receipt] = field(default_factory=list)


class Chain:
    """Serializes every contract call and advances the block height."""

    def __init__(self, genesis_height: int = 1) -> None:
        if genesis_height < 0:
            raise ValueError("genesis_height must be non-negative")
        self.block_height = genesis_height
        self.blocks: List[Block] = []
        self._contracts: Dict[str, AccumulatorContract] = {}
        self._closed = False

    def close(self) -> None:
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("chain session has been terminated")

    def deploy(self, contract: AccumulatorContract) -> None:
        if contract.identifier in self._contracts:
            raise ValueError(f"contract {contract.identifier} is already deployed")
        self._contracts[contract.identifier] = contract
        logger.info("deployed %s at height %d", contract.identifier, self.block_height)

    def contract(self, identifier: str) -> AccumulatorContract:
        try:
            return self._contracts[identifier]
        except KeyError:
            raise LookupError(f"no contract deployed at {identifier}") from None

    def mine_block(self, txs: Sequence[Tx]) -> Block:
        """Execute ``txs`` in order at the current height, then advance it."""
        self._check_open()
        for tx in txs:
            if tx.function not in self.contract(tx.contract).PUBLIC_FUNCTIONS:
                raise AttributeError(f"{tx.contract} has no public function {tx.function!r}")
            self.contract(tx.contract).validate_call(tx.function, tx.args)

        height = self.block_height
        receipts = []
        for index, tx in enumerate(txs):
            result = self.contract(tx.contract).call_public(
                tx.function, tx.args, tx.sender, height
            )
            receipts.append(Receipt(tx=tx, result=result, block_height=height, index=index))
        block = Block(height=height, receipts=receipts)
        self.blocks.append(block)
        self.block_height += 1
        logger.info("mined block %d with %d txs", height, len(receipts))
        return block

    def mine_empty_block(self, count: int = 1) -> int:
        """Advance the height by ``count`` empty blocks and return the new height."""
        self._check_open()
        if count < 0:
            raise ValueError("count must be non-negative")
        for _ in range(count):
            self.blocks.append(Block(height=self.block_height))
            self.block_height += 1
        return self.block_height

    def mine_empty_block_until(self, height: int) -> int:
        if height < self.block_height:
            raise ValueError(f"chain is already at height {self.block_height}")
        return self.mine_empty_block(height - self.block_height)

    def call_read_only(self, contract: str, function: str, args: Sequence[Any]) -> OptionalValue:
        self._check_open()
        return self.contract(contract).call_read_only(function, tuple(args))
