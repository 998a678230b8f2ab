"""
slotledger.api.model
====================

Base class for contract models: thin, typed wrappers that turn Python calls
into chain transactions and read-only lookups for one deployed contract.

Examples
--------
>>> from slotledger.runtime.context import Context
>>> from slotledger.api.accumulator import AccumulatorModel
>>> ctx = Context()
>>> ctx.models.get(AccumulatorModel) is ctx.models.get(AccumulatorModel)
True
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Sequence, Type, TypeVar, Union

from slotledger.core.result import OptionalValue
from slotledger.runtime.accounts import Account
from slotledger.runtime.chain import Chain, Tx

if TYPE_CHECKING:
    from slotledger.runtime.context import Context

SenderLike = Union[Account, str]
M = TypeVar("M", bound="Model")


def _address(sender: SenderLike) -> str:
    return sender.address if isinstance(sender, Account) else str(sender)


class Model:
    """Calls into a single contract deployed on a `Chain`."""

    def __init__(self, chain: Chain, contract_id: str) -> None:
        self.chain = chain
        self.contract_id = contract_id

    def call_public(self, function: str, args: Sequence[Any], sender: SenderLike) -> Tx:
        return Tx(
            contract=self.contract_id,
            function=function,
            args=tuple(args),
            sender=_address(sender),
        )

    def call_read_only(self, function: str, args: Sequence[Any]) -> OptionalValue:
        return self.chain.call_read_only(self.contract_id, function, args)


class ModelRegistry:
    """Lazily builds one model instance per model class for a `Context`."""

    def __init__(self, ctx: "Context") -> None:
        self._ctx = ctx
        self._models: Dict[Type[Model], Model] = {}

    def get(self, model_cls: Type[M]) -> M:
        if model_cls not in self._models:
            self._models[model_cls] = model_cls(self._ctx.chain, self._ctx.contract.identifier)
        return self._models[model_cls]  # type: ignore[return-value]
