"""Value objects produced by the budget validator."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class BudgetCheck:
    """Totals of an allocation list measured against a catalog item's ceilings."""

    welder_total: int
    foreman_total: int
    grand_total: int
    base_price: int
    welder_over: bool
    foreman_over: bool
    over_budget: bool

    @property
    def remaining(self) -> int:
        return self.base_price - self.grand_total

    def as_dict(self) -> dict[str, object]:
        return {
            "welderTotal": self.welder_total,
            "foremanTotal": self.foreman_total,
            "grandTotal": self.grand_total,
            "remaining": self.remaining,
            "welderOver": self.welder_over,
            "foremanOver": self.foreman_over,
            "overBudget": self.over_budget,
        }
