from __future__ import annotations

from typing import Iterable, Sequence

from backend.core.errors import (
    ForemanBudgetExceededError,
    NoLineItemsError,
    TotalBudgetExceededError,
    WelderBudgetExceededError,
)
from backend.core.schema import Allocation, CatalogItem, ClaimLineItem
from backend.domain import AllocationRole, BudgetCheck


def validate(allocations: Iterable[Allocation], item: CatalogItem) -> BudgetCheck:
    """Measure allocations against the item's total, welder and foreman ceilings.

    The three ceilings bind independently: catalog sub-budgets are not assumed
    to add up to the component total.
    """

    welder_total = 0
    foreman_total = 0
    for allocation in allocations:
        if allocation.role is AllocationRole.WELDER:
            welder_total += allocation.amount
        else:
            foreman_total += allocation.amount

    grand_total = welder_total + foreman_total
    welder_over = welder_total > item.welder_price
    foreman_over = foreman_total > item.foreman_price
    return BudgetCheck(
        welder_total=welder_total,
        foreman_total=foreman_total,
        grand_total=grand_total,
        base_price=item.base_price,
        welder_over=welder_over,
        foreman_over=foreman_over,
        over_budget=welder_over or foreman_over or (item.base_price - grand_total) < 0,
    )


def ensure_submittable(
    lines: Sequence[ClaimLineItem],
    allocations: Sequence[Allocation],
    item: CatalogItem,
) -> BudgetCheck:
    """Raise the first failed submit precondition, otherwise return the budget check."""

    if not lines:
        raise NoLineItemsError()

    check = validate(allocations, item)
    if check.welder_over:
        raise WelderBudgetExceededError(
            f"Welder allocations {check.welder_total} exceed the welder budget {item.welder_price}"
        )
    if check.foreman_over:
        raise ForemanBudgetExceededError(
            f"Foreman allocations {check.foreman_total} exceed the foreman budget {item.foreman_price}"
        )
    if check.over_budget:
        raise TotalBudgetExceededError(
            f"Total allocations {check.grand_total} exceed the component bonus {item.base_price}"
        )
    return check
