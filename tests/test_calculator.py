from __future__ import annotations

from decimal import Decimal

import pytest

from zzpadmin.core.calculator import InvoiceTotals, compute_totals, line_total
from zzpadmin.core.records import LineItem


def test_single_item_scenario() -> None:
    totals = compute_totals([{"quantity": 80, "unit_price": 43.75}], 21)
    assert totals.subtotal == Decimal("3500.00")
    assert totals.vat_amount == Decimal("735.00")
    assert totals.total == Decimal("4235.00")


def test_multiple_items_scenario() -> None:
    lines = [
        {"quantity": 1, "unit_price": 1250},
        {"quantity": 1, "unit_price": 3500},
        {"quantity": 50, "unit_price": 50},
    ]
    totals = compute_totals(lines, 21)
    assert totals == InvoiceTotals(Decimal("7250"), Decimal("1522.5"), Decimal("8772.5"))


@pytest.mark.parametrize("vat", [0, 9, 21, "21", 100])
def test_empty_items_give_zero_totals(vat: object) -> None:
    totals = compute_totals([], vat)
    assert (totals.subtotal, totals.vat_amount, totals.total) == (0, 0, 0)


def test_zero_vat_total_equals_subtotal() -> None:
    totals = compute_totals([LineItem(quantity=3, unit_price="19.99")], 0)
    assert totals.vat_amount == 0
    assert totals.total == totals.subtotal == Decimal("59.97")


def test_negative_vat_is_honoured() -> None:
    totals = compute_totals([{"quantity": 1, "unit_price": 100}], -10)
    assert totals.vat_amount == Decimal("-10")
    assert totals.total < totals.subtotal


def test_non_numeric_vat_counts_as_zero() -> None:
    totals = compute_totals([{"quantity": 2, "unit_price": 10}], "abc")
    assert totals.total == Decimal("20")


@pytest.mark.parametrize(
    "item",
    [
        {"quantity": "abc", "unit_price": 10},
        {"quantity": -5, "unit_price": 10},
        {"quantity": None, "unit_price": 10},
        {"unit_price": 10},
        {"quantity": float("nan"), "unit_price": 10},
        {"quantity": 3, "unit_price": -1},
        None,
    ],
)
def test_malformed_item_counts_as_zero(item: object) -> None:
    good = {"quantity": 2, "unit_price": 5}
    totals = compute_totals([good, item, good], 21)
    assert totals.subtotal == Decimal("20")


def test_stored_item_total_is_ignored() -> None:
    assert line_total({"quantity": 2, "unit_price": 5, "total": 999}) == Decimal("10")


def test_attribute_objects_are_accepted() -> None:
    class Row:
        quantity = 4
        unit_price = 2.5

    assert compute_totals([Row()], 0).subtotal == Decimal("10.0")


def test_total_is_exactly_subtotal_plus_vat() -> None:
    lines = [{"quantity": "0.1", "unit_price": 3}, {"quantity": 0.2, "unit_price": 3}, {"quantity": 7, "unit_price": "13.37"}]
    totals = compute_totals(lines, "9")
    assert totals.subtotal == Decimal("0.9") + Decimal("93.59")
    assert totals.total == totals.subtotal + totals.vat_amount


def test_repeated_calls_are_identical() -> None:
    lines = [{"quantity": 3, "unit_price": 33.33}, {"quantity": 1.5, "unit_price": 0.07}]
    first = compute_totals(lines, 21)
    second = compute_totals(lines, 21)
    assert first == second
    assert str(first.vat_amount) == str(second.vat_amount)


def test_rounded_keeps_invariant() -> None:
    totals = compute_totals([{"quantity": 12.5, "unit_price": 45}], 21).rounded()
    assert totals.subtotal == Decimal("562.50")
    assert totals.vat_amount == Decimal("118.13")
    assert totals.total == Decimal("680.63")
    assert totals.total == totals.subtotal + totals.vat_amount


def test_large_amounts_stay_exact() -> None:
    totals = compute_totals([{"quantity": "1e20", "unit_price": "1e10"}], 21).rounded()
    assert totals.subtotal == Decimal("1e30")
    assert totals.vat_amount == Decimal("2.1e29")
    assert totals.total == Decimal("1.21e30")


@pytest.mark.parametrize(
    "item",
    [
        {"quantity": "1e999999", "unit_price": "10"},
        {"quantity": "1e30", "unit_price": "1e20"},
        {"quantity": 2, "unit_price": Decimal("9e999")},
    ],
)
def test_amounts_out_of_range_count_as_zero(item: object) -> None:
    good = {"quantity": 2, "unit_price": 5}
    totals = compute_totals([good, item], 21)
    assert totals.subtotal == Decimal("10")
    assert totals.rounded().total == Decimal("12.10")


def test_vat_overflow_gives_zero_totals() -> None:
    totals = compute_totals([{"quantity": "1e20", "unit_price": "1e20"}], "1e30")
    assert (totals.subtotal, totals.vat_amount, totals.total) == (0, 0, 0)
