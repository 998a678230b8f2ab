"""
slotledger.runtime.context
==========================

A test/session context: one chain, its accounts, one deployed accumulator
contract, an optional journal, and the model registry.

Examples
--------
>>> from slotledger.runtime.context import Context
>>> ctx = Context()
>>> ctx.chain.block_height
1
>>> ctx.contract.identifier.endswith(".accumulator")
True
>>> ctx.terminate()
"""

from __future__ import annotations
import logging
from typing import Optional

from slotledger.api.model import ModelRegistry
from slotledger.backends.polars.ledger import PolarsJournal
from slotledger.core.config import ContractConfig
from slotledger.core.contract import AccumulatorContract
from slotledger.core.traits import JournalOps
from slotledger.runtime.accounts import Account, Accounts
from slotledger.runtime.chain import Chain

logger = logging.getLogger(__name__)


class Context:
    """Everything a session needs, wired together."""

    def __init__(
        self,
        config: Optional[ContractConfig] = None,
        journal: Optional[JournalOps] = None,
        accounts: Optional[Accounts] = None,
    ) -> None:
        self.config = config or ContractConfig()
        self.accounts = accounts or Accounts.default()
        self.chain = Chain(genesis_height=self.config.genesis_height)
        if journal is None and self.config.journal:
            journal = PolarsJournal(ledger_name=self.config.contract_name)
        self.journal = journal
        self.contract = AccumulatorContract(
            f"{self.deployer.address}.{self.config.contract_name}",
            config=self.config,
            journal=self.journal,
        )
        self.chain.deploy(self.contract)
        self.models = ModelRegistry(self)
        self._terminated = False

    @property
    def deployer(self) -> Account:
        return self.accounts.deployer

    @property
    def terminated(self) -> bool:
        return self._terminated

    def terminate(self) -> None:
        """End the session; later calls through this context are refused."""
        if self._terminated:
            return
        self._terminated = True
        logger.info(
            "session for %s ended at height %d", self.contract.identifier, self.chain.block_height
        )
        self.chain.close()
