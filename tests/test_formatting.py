from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from zzpadmin.core.currency import fmt_money, fmt_number, sum_money, to_decimal
from zzpadmin.core.dates import days_overdue, due_date, fmt_date

NBSP = "\u00a0"


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("3500"), "€ 3.500,00"),
        (1522.5, "€ 1.522,50"),
        (1234567.891, "€ 1.234.567,89"),
        (0, "€ 0,00"),
        (None, "€ 0,00"),
        (-12.5, "€ -12,50"),
        ("0.005", "€ 0,01"),
        (999.999, "€ 1.000,00"),
    ],
)
def test_fmt_money_nl(value: object, expected: str) -> None:
    assert fmt_money(value) == expected.replace(" ", NBSP)


def test_fmt_money_width() -> None:
    assert fmt_money(1, width=10) == f"    €{NBSP}1,00"


@pytest.mark.parametrize("value, expected", [(80, "80"), (Decimal("1.50"), "1.5"), (21.0, "21"), ("0.25", "0.25")])
def test_fmt_number(value: object, expected: str) -> None:
    assert fmt_number(value) == expected


def test_to_decimal_is_lenient() -> None:
    assert to_decimal("abc") == 0
    assert to_decimal(True) == 0
    assert to_decimal(float("inf")) == 0
    assert to_decimal(" 4.20 ") == Decimal("4.20")
    assert sum_money([0.1, 0.2]) == Decimal("0.3")


def test_dates() -> None:
    assert fmt_date(date(2023, 1, 5)) == "05-01-2023"
    assert fmt_date("2023-01-15T10:30:00") == "15-01-2023"
    assert fmt_date(datetime(2023, 12, 31, 23, 59)) == "31-12-2023"
    assert due_date("2023-01-15") == date(2023, 1, 29)
    # Crosses a month/year boundary
    assert due_date(date(2023, 12, 25)) == date(2024, 1, 8)


def test_days_overdue() -> None:
    assert days_overdue(date(2023, 1, 1), date(2023, 1, 10)) == 0
    assert days_overdue(date(2023, 1, 1), date(2023, 1, 15)) == 0
    assert days_overdue(date(2023, 1, 1), date(2023, 1, 20)) == 5
