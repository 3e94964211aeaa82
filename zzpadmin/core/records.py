from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from zzpadmin.core.calculator import line_total
from zzpadmin.core.currency import to_decimal, non_negative
from zzpadmin.core.dates import to_date

DEFAULT_VAT_PERCENT = Decimal("21")
PLACEHOLDER_COMPANY_NAME = "Your Company Name"


def _known(cls: type, data: Mapping[str, Any]) -> Dict[str, Any]:
	# Ignore unknown keys so raw database/API rows can be passed straight in
	names = {f.name for f in fields(cls)}
	return {k: v for k, v in data.items() if k in names}


def _text(val: Any) -> Optional[str]:
	if val is None:
		return None
	s = str(val)
	return s if s.strip() else None


@dataclass(frozen=True)
class LineItem:
	description: str = ""
	quantity: Decimal = Decimal("0")
	unit_price: Decimal = Decimal("0")
	project_id: Optional[int] = None
	project_number: Optional[str] = None
	project_title: Optional[str] = None

	def __post_init__(self) -> None:
		object.__setattr__(self, "description", str(self.description or ""))
		object.__setattr__(self, "quantity", non_negative(self.quantity))
		object.__setattr__(self, "unit_price", non_negative(self.unit_price))

	@property
	def total(self) -> Decimal:
		return line_total(self)

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "LineItem":
		values = _known(cls, data)
		# Accept the joined {"projects": {"project_number", "title"}} row shape
		project = data.get("projects") or data.get("project")
		if isinstance(project, Mapping):
			values.setdefault("project_number", project.get("project_number"))
			values.setdefault("project_title", project.get("title"))
		return cls(**values)


@dataclass(frozen=True)
class Invoice:
	invoice_number: str
	invoice_date: date
	vat_percent: Decimal = DEFAULT_VAT_PERCENT
	is_paid: bool = False
	subtotal: Decimal = Decimal("0")
	vat_amount: Decimal = Decimal("0")
	total: Decimal = Decimal("0")
	notes: Optional[str] = None
	client_id: Optional[int] = None
	id: Optional[int] = None

	def __post_init__(self) -> None:
		object.__setattr__(self, "invoice_number", str(self.invoice_number))
		d = to_date(self.invoice_date)
		if d is None:
			raise ValueError(f"Invalid invoice date: {self.invoice_date!r}")
		object.__setattr__(self, "invoice_date", d)
		object.__setattr__(self, "is_paid", bool(self.is_paid))
		for name in ("vat_percent", "subtotal", "vat_amount", "total"):
			object.__setattr__(self, name, to_decimal(getattr(self, name)))

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "Invoice":
		values = _known(cls, data)
		# Column names used by the hosted schema
		for legacy, name in (("total_excl_vat", "subtotal"), ("total_incl_vat", "total")):
			if legacy in data and name not in values:
				values[name] = data[legacy]
		return cls(**values)


@dataclass(frozen=True)
class Client:
	name: str
	email: Optional[str] = None
	phone: Optional[str] = None
	address: Optional[str] = None
	kvk_number: Optional[str] = None
	btw_number: Optional[str] = None
	id: Optional[int] = None

	def __post_init__(self) -> None:
		name = str(self.name or "").strip()
		if not name:
			raise ValueError("Client name is required")
		object.__setattr__(self, "name", name)
		for f in ("email", "phone", "address", "kvk_number", "btw_number"):
			object.__setattr__(self, f, _text(getattr(self, f)))

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "Client":
		return cls(**_known(cls, data))


@dataclass(frozen=True)
class CompanySettings:
	company_name: Optional[str] = None
	address: Optional[str] = None
	kvk_number: Optional[str] = None
	btw_number: Optional[str] = None
	iban: Optional[str] = None
	phone: Optional[str] = None
	email: Optional[str] = None
	vat_default: Decimal = DEFAULT_VAT_PERCENT
	payment_terms: Optional[str] = None

	def __post_init__(self) -> None:
		for f in ("company_name", "address", "kvk_number", "btw_number", "iban", "phone", "email", "payment_terms"):
			object.__setattr__(self, f, _text(getattr(self, f)))
		vat = self.vat_default
		object.__setattr__(self, "vat_default", DEFAULT_VAT_PERCENT if vat is None else to_decimal(vat))

	@property
	def display_name(self) -> str:
		return self.company_name or PLACEHOLDER_COMPANY_NAME

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "CompanySettings":
		return cls(**_known(cls, data))

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


@dataclass(frozen=True)
class Project:
	project_number: str
	title: Optional[str] = None
	description: Optional[str] = None
	client_id: Optional[int] = None
	id: Optional[int] = None

	def __post_init__(self) -> None:
		number = str(self.project_number or "").strip()
		if not number:
			raise ValueError("Project number is required")
		object.__setattr__(self, "project_number", number)

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "Project":
		return cls(**_known(cls, data))


# Substituted when an owner has not saved company settings yet
DEFAULT_COMPANY_SETTINGS = CompanySettings(
	company_name=PLACEHOLDER_COMPANY_NAME,
	address="Your Company Address",
	kvk_number="KVK Number",
	btw_number="BTW Number",
	iban="NL00BANK0123456789",
	phone="Your Phone",
	email="your.email@example.com",
	vat_default=DEFAULT_VAT_PERCENT,
	payment_terms="Betaling binnen 14 dagen na factuurdatum.",
)
