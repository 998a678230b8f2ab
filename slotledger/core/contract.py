"""
slotledger.core.contract
========================

`AccumulatorContract` composes the initialization gate and the scheduled
accumulator behind three entry points:

- ``initialize(caller)`` -> ``(ok true)`` once, ``(err u1001)`` afterwards
- ``set_values(values, caller, current_height)`` -> ``(ok true)``, or
  ``(err u1001)`` before initialization, ``(err u1002)`` on overflow
- ``get_value(height)`` -> the slot value or None

The hosting environment resolves the caller and the block height; the
contract never reads a clock or chooses a height. Each call either commits
completely or leaves the state untouched. When a journal is attached, every
committed transition and every call outcome is appended to it.

Examples
--------
>>> from slotledger.core.contract import AccumulatorContract
>>> c = AccumulatorContract("ST1.accumulator")
>>> str(c.set_values([1], caller="ST2", current_height=1))
'(err u1001)'
>>> str(c.initialize(caller="ST2"))
'(ok true)'
>>> str(c.set_values([1, 2, 3], caller="ST2", current_height=4))
'(ok true)'
>>> c.get_value(5), c.get_value(7)
(2, None)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Union

from slotledger.core.accumulator import (
    ScheduledAccumulatorLedger,
    validate_height,
    validate_values,
)
from slotledger.core.config import ContractConfig
from slotledger.core.errors import ContractError
from slotledger.core.gate import GateState, InitGate
from slotledger.core.names import ContractId, Principal
from slotledger.core.result import OptionalValue, Response
from slotledger.core.traits import JournalOps

logger = logging.getLogger(__name__)

PrincipalLike = Union[Principal, str]


@dataclass(frozen=True)
class ContractState:
    """Detached copy of the full contract state."""

    gate: GateState
    slots: Dict[int, int]


class AccumulatorContract:
    """One deployed instance of the scheduled accumulator."""

    PUBLIC_FUNCTIONS = ("initialize", "set-values")
    READ_ONLY_FUNCTIONS = ("get-value",)

    def __init__(
        self,
        identifier: Union[ContractId, str],
        config: Optional[ContractConfig] = None,
        journal: Optional[JournalOps] = None,
    ) -> None:
        self.identifier = str(identifier)
        self.config = config or ContractConfig()
        self.journal = journal
        self.gate = InitGate()
        self.ledger = ScheduledAccumulatorLedger(max_value=self.config.max_value)

    # ---- public functions ----

    def initialize(self, caller: PrincipalLike, current_height: int = 0) -> Response:
        validate_height(current_height)
        try:
            self.gate.require_uninitialized()
        except ContractError as e:
            return self._reject("initialize", caller, current_height, e)
        if self.journal is not None:
            self.journal.record_initialized(
                entity=self.identifier, sender=str(caller), block_height=current_height
            )
        response = self._commit("initialize", caller, current_height)
        self.gate.initialize(caller)
        return response

    def set_values(
        self,
        values: Iterable[int],
        caller: PrincipalLike,
        current_height: int,
    ) -> Response:
        """Merge ``values[i]`` into the slot at ``current_height + i``.

        Argument errors (non-int, negative or out-of-domain values, a bad
        height) raise before the gate is consulted, as the call would never
        have reached the contract. The journal is written before any slot
        changes, so a journal failure propagates with the state untouched.
        """
        checked = validate_values(values, self.config.max_value)
        validate_height(current_height, span=len(checked))
        args = {"values": checked}
        try:
            self.gate.require_initialized()
            merges = self.ledger.plan(checked, current_height)
        except ContractError as e:
            return self._reject("set-values", caller, current_height, e, args)
        if self.journal is not None:
            self.journal.record_merges(
                entity=self.identifier,
                sender=str(caller),
                block_height=current_height,
                merges=merges,
            )
        response = self._commit("set-values", caller, current_height, args)
        self.ledger.apply(merges)
        return response

    # ---- read-only functions ----

    def get_value(self, height: int) -> Optional[int]:
        return self.ledger.get(validate_height(height))

    # ---- dispatch used by the chain simulator ----

    def validate_call(self, function: str, args: Sequence[Any]) -> None:
        """Check a call's function name and arguments without executing it."""
        if function == "initialize":
            if args:
                raise TypeError("initialize takes no arguments")
        elif function == "set-values":
            if len(args) != 1:
                raise TypeError("set-values takes exactly one argument")
            validate_values(args[0], self.config.max_value)
        elif function == "get-value":
            if len(args) != 1:
                raise TypeError("get-value takes exactly one argument")
            validate_height(args[0])
        else:
            raise AttributeError(f"{self.identifier} has no function {function!r}")

    def call_public(
        self,
        function: str,
        args: Sequence[Any],
        caller: PrincipalLike,
        current_height: int,
    ) -> Response:
        handlers: Dict[str, Callable[[], Response]] = {
            "initialize": lambda: self.initialize(caller, current_height),
            "set-values": lambda: self.set_values(args[0], caller, current_height),
        }
        if function not in handlers:
            raise AttributeError(f"{self.identifier} has no public function {function!r}")
        self.validate_call(function, args)
        return handlers[function]()

    def call_read_only(self, function: str, args: Sequence[Any]) -> OptionalValue:
        if function not in self.READ_ONLY_FUNCTIONS:
            raise AttributeError(f"{self.identifier} has no read-only function {function!r}")
        self.validate_call(function, args)
        return OptionalValue.of(self.get_value(args[0]))

    # ---- state ----

    @property
    def initialized(self) -> bool:
        return self.gate.initialized

    def state(self) -> ContractState:
        return ContractState(gate=self.gate.state, slots=self.ledger.snapshot())

    def _commit(
        self,
        function: str,
        caller: PrincipalLike,
        height: int,
        args: Optional[Dict[str, Any]] = None,
    ) -> Response:
        response = Response.ok(True)
        logger.debug("%s %s by %s at %d -> %s", self.identifier, function, caller, height, response)
        self._record_call(function, caller, height, response, args)
        return response

    def _reject(
        self,
        function: str,
        caller: PrincipalLike,
        height: int,
        error: ContractError,
        args: Optional[Dict[str, Any]] = None,
    ) -> Response:
        response = Response.err(error.kind)
        logger.warning(
            "%s %s by %s at %d rejected: %s", self.identifier, function, caller, height, error
        )
        self._record_call(function, caller, height, response, args)
        return response

    def _record_call(
        self,
        function: str,
        caller: PrincipalLike,
        height: int,
        response: Response,
        args: Optional[Dict[str, Any]],
    ) -> None:
        if self.journal is None:
            return
        self.journal.record_call(
            entity=self.identifier,
            sender=str(caller),
            block_height=height,
            function=function,
            response=response,
            args=args,
        )

    def __repr__(self) -> str:
        return (
            f"AccumulatorContract({self.identifier!r}, state={self.gate.state.value!r}, "
            f"slots={len(self.ledger)})"
        )
