"""
slotledger.core.config
======================

Configuration for a contract deployment and its simulated environment.

Values come from keyword arguments or, through `ContractConfig.from_env`,
from ``SLOTLEDGER_*`` environment variables.

Examples
--------
>>> from slotledger.core.config import ContractConfig
>>> cfg = ContractConfig(max_value=255)
>>> cfg.max_value, cfg.genesis_height
(255, 1)
>>> ContractConfig.from_env(environ={"SLOTLEDGER_JOURNAL": "false"}).journal
False
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from slotledger.core.names import U128_MAX

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class ContractConfig:
    """Deployment parameters.

    Parameters
    ----------
    max_value : int
        Largest value a slot may hold (inclusive). Defaults to the u128 bound.
    contract_name : str
        Contract name, combined with the deployer principal into its identifier.
    journal : bool
        Whether a `Context` attaches a journal to the deployed contract.
    genesis_height : int
        Height at which the simulated chain mines its first block.
    """

    max_value: int = U128_MAX
    contract_name: str = "accumulator"
    journal: bool = True
    genesis_height: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.max_value, bool) or not isinstance(self.max_value, int):
            raise TypeError("max_value must be an int")
        if self.max_value <= 0:
            raise ValueError("max_value must be positive")
        if self.genesis_height < 0:
            raise ValueError("genesis_height must be non-negative")
        if not self.contract_name:
            raise ValueError("contract_name must not be empty")

    @classmethod
    def from_env(
        cls,
        prefix: str = "SLOTLEDGER_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ContractConfig":
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs = {}
        if f"{prefix}MAX_VALUE" in env:
            kwargs["max_value"] = int(env[f"{prefix}MAX_VALUE"])
        if f"{prefix}CONTRACT_NAME" in env:
            kwargs["contract_name"] = env[f"{prefix}CONTRACT_NAME"]
        if f"{prefix}JOURNAL" in env:
            kwargs["journal"] = _parse_bool(f"{prefix}JOURNAL", env[f"{prefix}JOURNAL"])
        if f"{prefix}GENESIS_HEIGHT" in env:
            kwargs["genesis_height"] = int(env[f"{prefix}GENESIS_HEIGHT"])
        return cls(**kwargs)
