"""Stock adjustment results.

Adjustments report success or failure as values so the coordinator
can decide, in one place, when a unit of work must be rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Union

from rpos.domain.exceptions import DomainException


class StockDirection(IntEnum):
    CONSUME = -1
    RESTORE = 1


@dataclass(frozen=True)
class StockAdjusted:
    item_kind: str  # "product" | "ingredient"
    item_id: int
    item_name: str
    previous: Decimal | int
    current: Decimal | int

    ok = True

    @property
    def delta(self) -> Decimal | int:
        return self.current - self.previous


@dataclass(frozen=True)
class StockAdjustmentFailed:
    error: DomainException

    ok = False


AdjustmentResult = Union[StockAdjusted, StockAdjustmentFailed]


@dataclass
class StockOutcome:
    """Net result of applying one order's stock effect."""

    direction: StockDirection
    adjustments: list[StockAdjusted] = field(default_factory=list)
    failure: DomainException | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    def raise_for_failure(self) -> None:
        if self.failure is not None:
            raise self.failure
