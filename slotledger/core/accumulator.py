"""
slotledger.core.accumulator
===========================

Sparse, block-height indexed accumulator.

A submission of ``k`` values at height ``h`` is *scheduled forward*: value ``i``
is merged into slot ``h + i``. Merging is plain addition with an absent slot
read as zero, so submissions that share a block commute and the final ledger
does not depend on the order in which they were applied.

Writes are all-or-nothing. `ScheduledAccumulatorLedger.plan` computes every new
slot value first and raises `ValueOverflowError` before anything is touched;
`ScheduledAccumulatorLedger.apply` then commits the plan.

Examples
--------
>>> from slotledger.core.accumulator import ScheduledAccumulatorLedger
>>> acc = ScheduledAccumulatorLedger()
>>> _ = acc.merge([1, 2, 3], current_height=2)
>>> _ = acc.merge([1, 2, 3], current_height=3)
>>> [acc.get(h) for h in range(2, 7)]
[1, 3, 5, 3, None]
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from slotledger.core.errors import ValueOverflowError
from slotledger.core.names import MAX_BLOCK_HEIGHT, U128_MAX, BlockHeight, Value

logger = logging.getLogger(__name__)


def validate_values(values: Iterable[int], max_value: int = U128_MAX) -> List[int]:
    """Check a submission against the unsigned value domain and return it as a list.

    Raises
    ------
    TypeError
        If an element is not an int (bools are rejected too).
    ValueError
        If an element is negative or larger than ``max_value``.
    """
    checked: List[int] = []
    for i, v in enumerate(values):
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f"values[{i}] must be an unsigned int, got {v!r}")
        if v < 0 or v > max_value:
            raise ValueError(f"values[{i}]={v} is outside [0, {max_value}]")
        checked.append(v)
    return checked


def validate_height(height: int, span: int = 1) -> int:
    """Check a block height, and that ``span`` slots starting there stay addressable."""
    if isinstance(height, bool) or not isinstance(height, int):
        raise TypeError(f"block height must be an int, got {height!r}")
    if height < 0:
        raise ValueError(f"block height must be non-negative, got {height}")
    if height + max(span, 1) - 1 > MAX_BLOCK_HEIGHT:
        raise ValueError(
            f"block heights {height}..{height + max(span, 1) - 1} exceed {MAX_BLOCK_HEIGHT}"
        )
    return height


@dataclass(frozen=True)
class SlotMerge:
    """One planned addition into a slot."""

    height: BlockHeight
    contribution: Value
    previous: Optional[Value]
    total: Value


class ScheduledAccumulatorLedger:
    """Mapping of block height to the sum of every contribution merged there."""

    def __init__(
        self,
        max_value: int = U128_MAX,
        slots: Optional[Dict[int, int]] = None,
    ) -> None:
        self.max_value = max_value
        self._slots: Dict[int, int] = dict(slots) if slots else {}

    # ---- writes ----

    def plan(self, values: Sequence[int], current_height: int) -> List[SlotMerge]:
        """Compute the merges for a submission without committing them.

        Raises `ValueOverflowError` if any resulting slot would exceed
        ``max_value``.
        """
        merges: List[SlotMerge] = []
        for offset, contribution in enumerate(values):
            height = current_height + offset
            previous = self._slots.get(height)
            total = (previous or 0) + contribution
            if total > self.max_value:
                raise ValueOverflowError(height, previous or 0, contribution, self.max_value)
            merges.append(
                SlotMerge(
                    height=BlockHeight(height),
                    contribution=Value(contribution),
                    previous=None if previous is None else Value(previous),
                    total=Value(total),
                )
            )
        return merges

    def apply(self, merges: Iterable[SlotMerge]) -> None:
        for m in merges:
            self._slots[m.height] = self._slots.get(m.height, 0) + m.contribution
            logger.debug("slot %d += %d -> %d", m.height, m.contribution, self._slots[m.height])

    def merge(self, values: Sequence[int], current_height: int) -> List[SlotMerge]:
        """Plan and commit a submission in one step."""
        merges = self.plan(values, current_height)
        self.apply(merges)
        return merges

    # ---- reads ----

    def get(self, height: int) -> Optional[int]:
        return self._slots.get(height)

    def heights(self) -> List[int]:
        return sorted(self._slots)

    def snapshot(self) -> Dict[int, int]:
        """Copy of the slots mapping."""
        return dict(self._slots)

    def items(self) -> Iterator[Tuple[int, int]]:
        for h in self.heights():
            yield h, self._slots[h]

    def __contains__(self, height: object) -> bool:
        return height in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"ScheduledAccumulatorLedger(slots={len(self._slots)}, max_value={self.max_value})"
