from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint, event

from zzpadmin.core.calculator import line_total

# Every table carries owner_id; the repository filters on it for every query.


class Client(SQLModel, table=True):
	id: Optional[int] = Field(default=None, primary_key=True)
	owner_id: str = Field(index=True)
	name: str
	email: Optional[str] = None
	phone: Optional[str] = None
	address: Optional[str] = None
	kvk_number: Optional[str] = None
	btw_number: Optional[str] = None


class Project(SQLModel, table=True):
	id: Optional[int] = Field(default=None, primary_key=True)
	owner_id: str = Field(index=True)
	project_number: str
	title: Optional[str] = None
	description: Optional[str] = None
	client_id: int = Field(foreign_key="client.id", index=True)


class Invoice(SQLModel, table=True):
	__table_args__ = (UniqueConstraint("owner_id", "invoice_number", name="uq_invoice_owner_number"),)

	id: Optional[int] = Field(default=None, primary_key=True)
	owner_id: str = Field(index=True)
	invoice_number: str = Field(index=True)
	invoice_date: date
	client_id: int = Field(foreign_key="client.id", index=True)
	vat_percent: float = 21.0
	is_paid: bool = False
	# Derived from the items and vat_percent; written only together by the repository
	subtotal: float = 0.0
	vat_amount: float = 0.0
	total: float = 0.0
	notes: Optional[str] = None


class InvoiceItem(SQLModel, table=True):
	id: Optional[int] = Field(default=None, primary_key=True)
	owner_id: str = Field(index=True)
	invoice_id: int = Field(foreign_key="invoice.id", index=True)
	project_id: Optional[int] = Field(default=None, foreign_key="project.id")
	# Display order within the invoice
	position: int = 0
	description: str = ""
	quantity: float = 0.0
	unit_price: float = 0.0
	# Stored total = quantity * unit_price (computed on insert/update)
	total: float = 0.0


class CompanySettings(SQLModel, table=True):
	id: Optional[int] = Field(default=None, primary_key=True)
	owner_id: str = Field(index=True, sa_column_kwargs={"unique": True})
	company_name: Optional[str] = None
	address: Optional[str] = None
	kvk_number: Optional[str] = None
	btw_number: Optional[str] = None
	iban: Optional[str] = None
	phone: Optional[str] = None
	email: Optional[str] = None
	vat_default: float = 21.0
	payment_terms: Optional[str] = None


@event.listens_for(InvoiceItem, "before_insert")
@event.listens_for(InvoiceItem, "before_update")
def _compute_item_total(mapper, connection, target: InvoiceItem):  # type: ignore[no-redef]
	target.total = float(line_total(target))
