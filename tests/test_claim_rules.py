from __future__ import annotations

from datetime import date
from itertools import count
from pathlib import Path
import sys

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend.core import budget, claim_builder, review
from backend.core.catalog import load_catalog
from backend.core.errors import (
    ClaimLockedError,
    EmptyRejectionCommentError,
    ForemanBudgetExceededError,
    InvalidTransitionError,
    NoLineItemsError,
    TotalBudgetExceededError,
    WelderBudgetExceededError,
)
from backend.core.quarters import quarter_of, summary_date
from backend.core.schema import Allocation, CatalogItem, Claim, ClaimDraft, ClaimLineItem, WeldSpec
from backend.core.sheet_numbers import category_code, generate_sheet_no, yard_code
from backend.domain import AllocationRole, Category, ClaimStatus


def _item(**overrides) -> CatalogItem:
    values = dict(
        id="T1",
        category=Category.TP,
        item_name="Test item",
        base_price=800,
        welder_price=600,
        foreman_price=200,
        default_welders=3,
        default_foremen=2,
        specs=(
            WeldSpec(id="T1-1", config_name="A", drawing_no="D-1", weld_no="W01", weight=10),
            WeldSpec(id="T1-2", config_name="B", drawing_no="D-2", weld_no="W02", weight=20),
            WeldSpec(id="T1-3", config_name="A", drawing_no="D-1", weld_no="W03", weight=30),
        ),
    )
    values.update(overrides)
    return CatalogItem(**values)


def _claim(status: ClaimStatus = ClaimStatus.PENDING, comment: str | None = None) -> Claim:
    return Claim(
        id="c1",
        sheet_no="24Y1TP01",
        workstation="Y1",
        applicant_name="Alice",
        submit_date="2024-02-10",
        master_item_id="7",
        items=[ClaimLineItem(spec_id="7-1", drawing_no="D", weld_no="W01")],
        status=status,
        admin_comment=comment,
    )


def _alloc(role: AllocationRole, amount: int) -> Allocation:
    return Allocation(worker_id=f"{role.value}-{amount}", worker_name="x", role=role, amount=amount)


# ----------------------------------------------------------------------
# claim builder
# ----------------------------------------------------------------------
def test_line_items_follow_selected_configuration_in_catalog_order():
    lines = claim_builder.build_line_items(_item(), "A", "S-9", submit_date="2024-05-01")

    assert [line.weld_no for line in lines] == ["W01", "W03"]
    assert {line.item_serial for line in lines} == {"S-9"}
    assert {line.ut_date for line in lines} == {"2024-05-01"}
    assert [line.weight for line in lines] == [10, 30]


def test_unknown_configuration_yields_no_lines():
    assert claim_builder.build_line_items(_item(), "missing", "") == []


def test_apply_serial_restamps_every_line():
    lines = claim_builder.build_line_items(_item(), "A", "")
    stamped = claim_builder.apply_serial(lines, "TP-42")

    assert [line.item_serial for line in stamped] == ["TP-42", "TP-42"]
    assert [line.item_serial for line in lines] == ["", ""]


@pytest.mark.parametrize("item", list(load_catalog()), ids=lambda item: item.id)
def test_default_allocations_match_headcount_and_floor_share(item):
    rows = claim_builder.build_default_allocations(item)

    welders = [row for row in rows if row.role is AllocationRole.WELDER]
    foremen = [row for row in rows if row.role is AllocationRole.FOREMAN]
    assert len(rows) == item.default_welders + item.default_foremen
    assert sum(row.amount for row in welders) == (item.welder_price // item.default_welders) * item.default_welders
    assert sum(row.amount for row in foremen) == (item.foreman_price // item.default_foremen) * item.default_foremen
    assert sum(row.amount for row in welders) <= item.welder_price
    assert sum(row.amount for row in foremen) <= item.foreman_price


def test_default_allocations_put_foremen_first_with_fresh_ids():
    ids = count(1)
    rows = claim_builder.build_default_allocations(_item(), id_factory=lambda: f"w{next(ids)}")

    assert [row.role for row in rows] == [AllocationRole.FOREMAN] * 2 + [AllocationRole.WELDER] * 3
    assert [row.worker_id for row in rows] == ["w1", "w2", "w3", "w4", "w5"]
    assert {row.worker_name for row in rows} == {""}
    assert [row.amount for row in rows] == [100, 100, 200, 200, 200]


def test_zero_headcount_seeds_no_rows_for_that_role():
    rows = claim_builder.build_default_allocations(_item(default_foremen=0))

    assert {row.role for row in rows} == {AllocationRole.WELDER}
    assert claim_builder.default_amount(_item(), AllocationRole.FOREMAN, 0) == 200


def test_redistribute_splits_sub_budgets_over_current_rows():
    rows = [
        _alloc(AllocationRole.WELDER, 1),
        _alloc(AllocationRole.FOREMAN, 1),
        _alloc(AllocationRole.WELDER, 2),
        _alloc(AllocationRole.WELDER, 3),
        _alloc(AllocationRole.WELDER, 4),
    ]

    result = claim_builder.redistribute(rows, _item())

    assert [row.amount for row in result] == [150, 200, 150, 150, 150]
    assert [row.worker_id for row in result] == [row.worker_id for row in rows]


# ----------------------------------------------------------------------
# budget
# ----------------------------------------------------------------------
def test_validate_within_every_ceiling():
    check = budget.validate([_alloc(AllocationRole.WELDER, 500), _alloc(AllocationRole.FOREMAN, 200)], _item())

    assert (check.welder_total, check.foreman_total, check.grand_total) == (500, 200, 700)
    assert not check.welder_over
    assert not check.foreman_over
    assert not check.over_budget
    assert check.remaining == 100


def test_validate_flags_foreman_ceiling():
    check = budget.validate(
        [_alloc(AllocationRole.WELDER, 500), _alloc(AllocationRole.FOREMAN, 200)],
        _item(foreman_price=150),
    )

    assert check.foreman_over
    assert check.over_budget
    assert not check.welder_over


def test_validate_flags_total_even_when_sub_budgets_hold():
    item = _item(base_price=600, welder_price=500, foreman_price=200)
    check = budget.validate([_alloc(AllocationRole.WELDER, 500), _alloc(AllocationRole.FOREMAN, 200)], item)

    assert not check.welder_over
    assert not check.foreman_over
    assert check.over_budget
    assert check.as_dict()["overBudget"] is True


@pytest.mark.parametrize(
    "lines, allocations, item, error",
    [
        ([], [], _item(), NoLineItemsError),
        (["line"], [_alloc(AllocationRole.WELDER, 601)], _item(), WelderBudgetExceededError),
        (["line"], [_alloc(AllocationRole.FOREMAN, 201)], _item(), ForemanBudgetExceededError),
        (
            ["line"],
            [_alloc(AllocationRole.WELDER, 600), _alloc(AllocationRole.FOREMAN, 200)],
            _item(base_price=700),
            TotalBudgetExceededError,
        ),
    ],
)
def test_ensure_submittable_reports_first_failure(lines, allocations, item, error):
    with pytest.raises(error) as exc_info:
        budget.ensure_submittable(lines, allocations, item)
    assert exc_info.value.reason == error.reason


# ----------------------------------------------------------------------
# sheet numbers
# ----------------------------------------------------------------------
def test_sheet_number_takes_next_serial_for_prefix():
    existing = [{"sheetNo": "24Y1TP01"}, {"sheetNo": "24Y1TP03"}, {"sheetNo": "24Y2TP07"}]

    assert generate_sheet_no("Y1", "TP", existing, today=date(2024, 6, 1)) == "24Y1TP04"


def test_sheet_number_starts_at_01():
    assert generate_sheet_no("Y3", Category.MATING, ["23Y3MT05"], today=date(2024, 1, 2)) == "24Y3MT01"


def test_sheet_number_ignores_non_numeric_suffixes():
    existing = ["24Y1JK0A", _claim().model_copy(update={"sheet_no": "24Y1JK02"})]

    assert generate_sheet_no("Y1", Category.JK, existing, today=date(2024, 3, 3)) == "24Y1JK03"


def test_unknown_yard_and_category_codes():
    assert yard_code("OFFICE") == "99"
    assert yard_code(None) == "99"
    assert category_code("Mating") == "MT"
    assert category_code("MT") == "MT"
    assert category_code("other") == "XX"


# ----------------------------------------------------------------------
# quarters
# ----------------------------------------------------------------------
@pytest.mark.parametrize(
    "submitted, expected",
    [
        ("2024-02-10", "2024-04-15"),
        ("2024-04-01", "2024-07-15"),
        ("2024-09-30", "2024-10-15"),
        ("2024-11-01", "2025-01-15"),
    ],
)
def test_summary_date_by_quarter(submitted, expected):
    assert summary_date(submitted) == expected


@pytest.mark.parametrize("value", ["2024-02-30", "2023-02-29", "2024-13-01", "2024-2-1"])
def test_dates_must_exist_on_the_calendar(value):
    with pytest.raises(ValidationError):
        ClaimDraft(master_item_id="7", submit_date=value)
    with pytest.raises(ValidationError):
        ClaimLineItem(spec_id="7-1", drawing_no="D", weld_no="W01", ut_date=value)

    assert ClaimDraft(master_item_id="7", submit_date="2024-02-29").submit_date == "2024-02-29"


def test_quarter_of_accepts_dates():
    assert quarter_of(date(2024, 12, 31)) == "Q4"
    assert quarter_of("2024-01-01") == "Q1"


# ----------------------------------------------------------------------
# review workflow
# ----------------------------------------------------------------------
def test_reject_requires_comment():
    claim = _claim()

    with pytest.raises(EmptyRejectionCommentError):
        review.transition(claim, ClaimStatus.REJECTED, "   ")
    assert claim.status is ClaimStatus.PENDING

    rejected = review.transition(claim, ClaimStatus.REJECTED, "missing UT record")
    assert rejected.status is ClaimStatus.REJECTED
    assert rejected.admin_comment == "missing UT record"


def test_no_direct_edge_between_terminal_states():
    with pytest.raises(InvalidTransitionError):
        review.transition(_claim(ClaimStatus.APPROVED), ClaimStatus.REJECTED, "late")
    with pytest.raises(InvalidTransitionError):
        review.transition(_claim(ClaimStatus.REJECTED, "bad"), ClaimStatus.APPROVED)


def test_reset_to_pending_keeps_comment():
    reset = review.transition(_claim(ClaimStatus.REJECTED, "bad weld"), ClaimStatus.PENDING)

    assert reset.status is ClaimStatus.PENDING
    assert reset.admin_comment == "bad weld"


def test_save_comment_is_idempotent():
    claim = _claim(ClaimStatus.APPROVED)

    once = review.save_comment(claim, "checked")
    twice = review.save_comment(once, "checked")

    assert twice.status is ClaimStatus.APPROVED
    assert twice.admin_comment == "checked"
    assert twice == once
    assert review.save_comment(twice, "").admin_comment == "checked"


def test_only_pending_claims_are_editable():
    review.ensure_editable(_claim())
    with pytest.raises(ClaimLockedError):
        review.ensure_editable(_claim(ClaimStatus.APPROVED))
