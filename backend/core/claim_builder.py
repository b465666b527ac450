"""Populate the weld lines and default bonus roster of a new claim."""
from __future__ import annotations

from typing import Callable, Iterable
from uuid import uuid4

from backend.core.schema import Allocation, CatalogItem, ClaimLineItem
from backend.domain import AllocationRole


def _new_worker_id() -> str:
    return str(uuid4())


def build_line_items(
    item: CatalogItem,
    configuration_name: str,
    default_serial: str,
    *,
    submit_date: str | None = None,
) -> list[ClaimLineItem]:
    """Return one line per weld of the selected configuration, in catalog order."""

    return [
        ClaimLineItem(
            spec_id=spec.id,
            drawing_no=spec.drawing_no,
            weld_no=spec.weld_no,
            item_serial=default_serial,
            weight=spec.weight,
            price=spec.price,
            ut_date=submit_date,
        )
        for spec in item.specs
        if spec.configuration == configuration_name
    ]


def apply_serial(lines: Iterable[ClaimLineItem], serial: str) -> list[ClaimLineItem]:
    """Stamp the claim-level component serial onto every line."""

    return [line.model_copy(update={"item_serial": serial}) for line in lines]


def default_amount(item: CatalogItem, role: AllocationRole, headcount: int) -> int:
    """Even share of a role's sub-budget; the whole sub-budget when nobody is counted."""

    budget = item.sub_budget(role)
    if headcount <= 0:
        return budget
    return budget // headcount


def build_default_allocations(
    item: CatalogItem,
    *,
    id_factory: Callable[[], str] = _new_worker_id,
) -> list[Allocation]:
    """Seed the roster with the item's default foremen followed by its default welders.

    A role whose default headcount is zero gets no rows.
    """

    allocations: list[Allocation] = []
    for role, headcount in (
        (AllocationRole.FOREMAN, item.default_foremen),
        (AllocationRole.WELDER, item.default_welders),
    ):
        if headcount <= 0:
            continue
        amount = default_amount(item, role, headcount)
        allocations.extend(
            Allocation(worker_id=id_factory(), worker_name="", role=role, amount=amount)
            for _ in range(headcount)
        )
    return allocations


def redistribute(allocations: Iterable[Allocation], item: CatalogItem) -> list[Allocation]:
    """Split each role's sub-budget evenly over the rows currently holding that role."""

    rows = list(allocations)
    counts = {role: sum(1 for row in rows if row.role is role) for role in AllocationRole}
    averages = {role: item.sub_budget(role) // count for role, count in counts.items() if count}
    return [row.model_copy(update={"amount": averages[row.role]}) for row in rows]
