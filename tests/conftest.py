from __future__ import annotations

from datetime import date

import pytest

from zzpadmin.core.records import Client, CompanySettings, Invoice, LineItem
from zzpadmin.data.db import Database
from zzpadmin.data.repo import Repository


@pytest.fixture
def db():
    database = Database.in_memory()
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def repo(db: Database) -> Repository:
    return Repository(db, "owner-1")


@pytest.fixture
def company() -> CompanySettings:
    return CompanySettings(
        company_name="Groen & Zn B.V.",
        address="Hoofdstraat 123\n1234 AB Amsterdam",
        kvk_number="76543210",
        btw_number="NL123456789B01",
        iban="NL91ABNA0417164300",
        phone="+31 20 123 4567",
        email="info@groen.nl",
    )


@pytest.fixture
def client_record() -> Client:
    return Client(
        name="Gemeente Amsterdam",
        address="Amstel 1\n1011 PN Amsterdam",
        kvk_number="34366966",
        btw_number="NL002564440B01",
        email="info@amsterdam.nl",
    )


@pytest.fixture
def items() -> list[LineItem]:
    return [
        LineItem(description="Ontwerp", quantity=1, unit_price=1250, project_number="P-1"),
        LineItem(description="Aanleg", quantity=1, unit_price=3500),
        LineItem(description="Planten", quantity=50, unit_price=50),
    ]


@pytest.fixture
def invoice() -> Invoice:
    return Invoice(
        invoice_number="F0001",
        invoice_date=date(2023, 1, 15),
        vat_percent=21,
        subtotal="7250.00",
        vat_amount="1522.50",
        total="8772.50",
    )
