from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from zzpadmin.core.records import Client, CompanySettings, Invoice, LineItem


def test_line_item_from_joined_row() -> None:
    item = LineItem.from_dict({
        "description": "Snoeien",
        "quantity": "2",
        "unit_price": 40,
        "total": 999,
        "projects": {"project_number": "P2024-001", "title": "Vondelpark"},
    })
    assert item.project_number == "P2024-001"
    assert item.project_title == "Vondelpark"
    assert item.total == Decimal("80")


def test_line_item_clamps_bad_numbers() -> None:
    item = LineItem(description=None, quantity=-1, unit_price="abc")
    assert (item.description, item.quantity, item.unit_price) == ("", 0, 0)


def test_invoice_from_hosted_row() -> None:
    inv = Invoice.from_dict({
        "invoice_number": "F0001",
        "invoice_date": "2023-01-15",
        "total_excl_vat": "7250.00",
        "total_incl_vat": "8772.50",
        "user_id": "abc",
    })
    assert inv.invoice_date == date(2023, 1, 15)
    assert inv.subtotal == Decimal("7250.00")
    assert inv.total == Decimal("8772.50")
    assert inv.vat_percent == Decimal("21")


def test_invoice_rejects_bad_date() -> None:
    with pytest.raises(ValueError):
        Invoice(invoice_number="F1", invoice_date="15/01/2023")


def test_client_requires_name() -> None:
    with pytest.raises(ValueError):
        Client(name="   ")
    client = Client(name=" Jan ", email="", kvk_number="  ")
    assert client.name == "Jan"
    assert client.email is None and client.kvk_number is None


def test_company_settings_defaults() -> None:
    settings = CompanySettings.from_dict({"company_name": "", "vat_default": None, "owner_id": "x"})
    assert settings.display_name == "Your Company Name"
    assert settings.vat_default == Decimal("21")


def test_client_name_from_non_string_row() -> None:
    assert Client.from_dict({"name": 1042}).name == "1042"
