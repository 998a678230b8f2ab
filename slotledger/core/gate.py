"""
slotledger.core.gate
====================

The one-way initialization gate.

The gate is an explicit two-state machine, ``UNINITIALIZED -> INITIALIZED``,
with no way back. `InitGate.initialize` performs the single transition and
`InitGate.require_initialized` is checked at the top of every guarded write.
Both failures raise `NotAuthorizedError`; the gate does not look at who is
calling.

Examples
--------
>>> from slotledger.core.gate import InitGate, GateState
>>> gate = InitGate()
>>> gate.state is GateState.UNINITIALIZED
True
>>> gate.initialize("ST1DEPLOYER")
True
>>> gate.initialized
True
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Optional, Union

from slotledger.core.errors import NotAuthorizedError
from slotledger.core.names import Principal

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class InitGate:
    """Contract-wide initialization flag."""

    def __init__(self, state: GateState = GateState.UNINITIALIZED) -> None:
        self._state = GateState(state)

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is GateState.INITIALIZED

    def initialize(self, caller: Optional[Union[Principal, str]] = None) -> bool:
        """Flip the gate. Raises `NotAuthorizedError` when already initialized."""
        self.require_uninitialized()
        self._state = GateState.INITIALIZED
        logger.info("gate initialized by %s", caller)
        return True

    def require_initialized(self) -> None:
        if self._state is not GateState.INITIALIZED:
            raise NotAuthorizedError("contract is not initialized")

    def require_uninitialized(self) -> None:
        if self._state is GateState.INITIALIZED:
            raise NotAuthorizedError("contract is already initialized")

    def __repr__(self) -> str:
        return f"InitGate(state={self._state.value!r})"
