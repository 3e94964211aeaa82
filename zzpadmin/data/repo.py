from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Tuple
import logging

from sqlmodel import Session, select
from sqlalchemy import func, delete, update

from zzpadmin.core import records
from zzpadmin.core.calculator import InvoiceTotals, compute_totals
from zzpadmin.core.currency import round_money, to_decimal
from zzpadmin.core.dates import due_date, days_overdue
from zzpadmin.core.errors import DuplicateInvoiceNumberError, NotFoundError
from zzpadmin.data.db import Database
from zzpadmin.data.models import Client, CompanySettings, Invoice, InvoiceItem, Project

logger = logging.getLogger(__name__)

# Distinguishes "leave unchanged" from an explicit None
_UNSET: Any = object()


@dataclass(frozen=True)
class InvoiceBundle:
	"""Everything the document renderer needs for one invoice."""
	invoice: records.Invoice
	items: List[records.LineItem]
	client: records.Client
	company_settings: Optional[records.CompanySettings]


@dataclass(frozen=True)
class InvoiceListRow:
	invoice: records.Invoice
	client_name: Optional[str]


@dataclass(frozen=True)
class DashboardSummary:
	client_count: int
	project_count: int
	invoice_count: int
	paid_revenue: Decimal
	outstanding_amount: Decimal


@dataclass(frozen=True)
class UpcomingPayment:
	invoice_id: int
	invoice_number: str
	client_name: Optional[str]
	total: Decimal
	due_date: date
	days_overdue: int


# ----- row -> record conversion -----

def _client_record(row: Client) -> records.Client:
	return records.Client(
		id=row.id,
		name=row.name,
		email=row.email,
		phone=row.phone,
		address=row.address,
		kvk_number=row.kvk_number,
		btw_number=row.btw_number,
	)


def _project_record(row: Project) -> records.Project:
	return records.Project(
		id=row.id,
		project_number=row.project_number,
		title=row.title,
		description=row.description,
		client_id=row.client_id,
	)


def _invoice_record(row: Invoice) -> records.Invoice:
	return records.Invoice(
		id=row.id,
		invoice_number=row.invoice_number,
		invoice_date=row.invoice_date,
		client_id=row.client_id,
		vat_percent=row.vat_percent,
		is_paid=row.is_paid,
		subtotal=row.subtotal,
		vat_amount=row.vat_amount,
		total=row.total,
		notes=row.notes,
	)


def _settings_record(row: CompanySettings) -> records.CompanySettings:
	return records.CompanySettings(
		company_name=row.company_name,
		address=row.address,
		kvk_number=row.kvk_number,
		btw_number=row.btw_number,
		iban=row.iban,
		phone=row.phone,
		email=row.email,
		vat_default=row.vat_default,
		payment_terms=row.payment_terms,
	)


def _as_line_item(item: Any) -> records.LineItem:
	if isinstance(item, records.LineItem):
		return item
	if isinstance(item, Mapping):
		return records.LineItem.from_dict(item)
	raise TypeError(f"Unsupported line item: {item!r}")


def _apply_totals(inv: Invoice, totals: InvoiceTotals) -> None:
	t = totals.rounded()
	inv.subtotal = float(t.subtotal)
	inv.vat_amount = float(t.vat_amount)
	inv.total = float(t.total)


class Repository:
	"""Owner-scoped persistence for clients, projects, invoices and company settings.

	Line items and the VAT percent of an invoice are only written through
	save_invoice/update_invoice, which recompute subtotal, VAT amount and total
	in the same transaction.
	"""

	def __init__(self, db: Database, owner_id: str) -> None:
		if not owner_id:
			raise ValueError("owner_id is required")
		self.db = db
		self.owner_id = owner_id

	# ----- helpers -----

	def _owned(self, s: Session, model: type, record_id: Optional[int], kind: str) -> Any:
		row = s.get(model, record_id) if record_id is not None else None
		if row is None or row.owner_id != self.owner_id:
			raise NotFoundError(kind, record_id)
		return row

	def _check_projects(self, s: Session, items: List[records.LineItem]) -> None:
		for it in items:
			if it.project_id is not None:
				self._owned(s, Project, it.project_id, "Project")

	def _write_items(self, s: Session, invoice_id: int, items: List[records.LineItem]) -> None:
		for pos, it in enumerate(items):
			s.add(InvoiceItem(
				owner_id=self.owner_id,
				invoice_id=invoice_id,
				project_id=it.project_id,
				position=pos,
				description=it.description,
				quantity=float(it.quantity),
				unit_price=float(it.unit_price),
			))

	def _items_for(self, s: Session, invoice_id: int) -> List[records.LineItem]:
		stmt = (
			select(InvoiceItem, Project)
			.join(Project, Project.id == InvoiceItem.project_id, isouter=True)
			.where(InvoiceItem.invoice_id == invoice_id, InvoiceItem.owner_id == self.owner_id)
			.order_by(InvoiceItem.position.asc(), InvoiceItem.id.asc())
		)
		out: List[records.LineItem] = []
		for item, project in s.exec(stmt).all():
			out.append(records.LineItem(
				description=item.description,
				quantity=item.quantity,
				unit_price=item.unit_price,
				project_id=item.project_id,
				project_number=project.project_number if project is not None else None,
				project_title=project.title if project is not None else None,
			))
		return out

	def _default_vat(self, s: Session) -> Decimal:
		row = s.exec(select(CompanySettings).where(CompanySettings.owner_id == self.owner_id)).first()
		return to_decimal(row.vat_default) if row is not None else records.DEFAULT_VAT_PERCENT

	def _check_unique_number(self, s: Session, number: str, exclude_id: Optional[int] = None) -> None:
		stmt = select(Invoice.id).where(Invoice.owner_id == self.owner_id, Invoice.invoice_number == number)
		for found in s.exec(stmt).all():
			if found != exclude_id:
				raise DuplicateInvoiceNumberError(number)

	# ----- clients -----

	def create_client(self, name: str, **fields: Any) -> records.Client:
		"""Create a client; name is required, other fields as in records.Client."""
		rec = records.Client(name=name, **fields)
		with self.db.session_scope() as s:
			row = Client(
				owner_id=self.owner_id,
				name=rec.name,
				email=rec.email,
				phone=rec.phone,
				address=rec.address,
				kvk_number=rec.kvk_number,
				btw_number=rec.btw_number,
			)
			s.add(row)
			# Ensure PK is populated before leaving the session
			s.flush()
			s.refresh(row)
			return _client_record(row)

	def update_client(self, client_id: int, **changes: Any) -> records.Client:
		with self.db.session_scope() as s:
			row = self._owned(s, Client, client_id, "Client")
			merged = {**asdict(_client_record(row)), **changes, "id": row.id}
			rec = records.Client(**merged)
			for name in ("name", "email", "phone", "address", "kvk_number", "btw_number"):
				setattr(row, name, getattr(rec, name))
			s.add(row)
			return rec

	def get_client(self, client_id: int) -> records.Client:
		with self.db.get_session() as s:
			return _client_record(self._owned(s, Client, client_id, "Client"))

	def list_clients(self, query: str = "") -> List[records.Client]:
		"""Clients ordered by name; optional case-insensitive search on name/email/phone."""
		q = (query or "").strip().lower()
		with self.db.get_session() as s:
			stmt = select(Client).where(Client.owner_id == self.owner_id)
			if q:
				like = f"%{q}%"
				stmt = stmt.where(
					(func.lower(Client.name).like(like))
					| (func.lower(Client.email).like(like))
					| (Client.phone.like(like))
				)
			stmt = stmt.order_by(Client.name.asc(), Client.id.asc())
			return [_client_record(r) for r in s.exec(stmt).all()]

	def delete_client(self, client_id: int) -> int:
		"""Delete a client with its projects, invoices and invoice items. Returns 1 or 0."""
		with self.db.session_scope() as s:
			row = s.get(Client, client_id)
			if row is None or row.owner_id != self.owner_id:
				return 0
			inv_ids = list(s.exec(select(Invoice.id).where(Invoice.client_id == client_id)).all())
			proj_ids = list(s.exec(select(Project.id).where(Project.client_id == client_id)).all())
			# Remove dependent records first so foreign keys hold on every SQLite version
			if inv_ids:
				s.exec(delete(InvoiceItem).where(InvoiceItem.invoice_id.in_(inv_ids)))
				s.exec(delete(Invoice).where(Invoice.id.in_(inv_ids)))
			if proj_ids:
				s.exec(update(InvoiceItem).where(InvoiceItem.project_id.in_(proj_ids)).values(project_id=None))
				s.exec(delete(Project).where(Project.id.in_(proj_ids)))
			s.delete(row)
			s.flush()
			logger.info("Deleted client %s with %d invoice(s), %d project(s)", client_id, len(inv_ids), len(proj_ids))
			return 1

	# ----- projects -----

	def create_project(self, project_number: str, client_id: int, title: Optional[str] = None, description: Optional[str] = None) -> records.Project:
		rec = records.Project(project_number=project_number, title=title, description=description, client_id=client_id)
		with self.db.session_scope() as s:
			self._owned(s, Client, client_id, "Client")
			row = Project(
				owner_id=self.owner_id,
				project_number=rec.project_number,
				title=rec.title,
				description=rec.description,
				client_id=client_id,
			)
			s.add(row)
			s.flush()
			s.refresh(row)
			return _project_record(row)

	def get_project(self, project_id: int) -> records.Project:
		with self.db.get_session() as s:
			return _project_record(self._owned(s, Project, project_id, "Project"))

	def list_projects(self, client_id: Optional[int] = None) -> List[records.Project]:
		with self.db.get_session() as s:
			stmt = select(Project).where(Project.owner_id == self.owner_id)
			if client_id is not None:
				stmt = stmt.where(Project.client_id == client_id)
			stmt = stmt.order_by(Project.project_number.asc(), Project.id.asc())
			return [_project_record(r) for r in s.exec(stmt).all()]

	def delete_project(self, project_id: int) -> int:
		"""Delete a project; line items that referenced it keep their amounts."""
		with self.db.session_scope() as s:
			row = s.get(Project, project_id)
			if row is None or row.owner_id != self.owner_id:
				return 0
			s.exec(update(InvoiceItem).where(InvoiceItem.project_id == project_id).values(project_id=None))
			s.delete(row)
			return 1

	# ----- company settings -----

	def get_company_settings(self) -> Optional[records.CompanySettings]:
		"""The owner's settings, or None when never saved (renderer substitutes defaults)."""
		with self.db.get_session() as s:
			row = s.exec(select(CompanySettings).where(CompanySettings.owner_id == self.owner_id)).first()
			return _settings_record(row) if row is not None else None

	def save_company_settings(self, settings: records.CompanySettings) -> records.CompanySettings:
		with self.db.session_scope() as s:
			row = s.exec(select(CompanySettings).where(CompanySettings.owner_id == self.owner_id)).first()
			if row is None:
				row = CompanySettings(owner_id=self.owner_id)
			for name, value in settings.to_dict().items():
				setattr(row, name, float(value) if name == "vat_default" else value)
			s.add(row)
			s.flush()
			return _settings_record(row)

	# ----- invoices -----

	def save_invoice(
		self,
		invoice_number: str,
		invoice_date: date,
		client_id: int,
		items: Iterable[Any] = (),
		vat_percent: Any = None,
		is_paid: bool = False,
		notes: Optional[str] = None,
	) -> records.Invoice:
		"""
		Create an invoice with its line items.

		vat_percent defaults to the owner's CompanySettings.vat_default (21 without
		settings). Subtotal, VAT amount and total are computed from the items and
		stored in the same transaction.
		"""
		number = str(invoice_number or "").strip()
		if not number:
			raise ValueError("Invoice number is required")
		line_items = [_as_line_item(it) for it in items]
		with self.db.session_scope() as s:
			self._owned(s, Client, client_id, "Client")
			self._check_projects(s, line_items)
			self._check_unique_number(s, number)
			vat = self._default_vat(s) if vat_percent is None else to_decimal(vat_percent)
			inv = Invoice(
				owner_id=self.owner_id,
				invoice_number=number,
				invoice_date=invoice_date,
				client_id=client_id,
				vat_percent=float(vat),
				is_paid=bool(is_paid),
				notes=notes,
			)
			_apply_totals(inv, compute_totals(line_items, vat))
			s.add(inv)
			s.flush()
			s.refresh(inv)
			self._write_items(s, inv.id, line_items)  # type: ignore[arg-type]
			logger.info("Created invoice %s (total %.2f)", number, inv.total)
			return _invoice_record(inv)

	def update_invoice(
		self,
		invoice_id: int,
		*,
		items: Optional[Iterable[Any]] = None,
		vat_percent: Any = None,
		invoice_number: Optional[str] = None,
		invoice_date: Optional[date] = None,
		client_id: Optional[int] = None,
		is_paid: Optional[bool] = None,
		notes: Any = _UNSET,
	) -> records.Invoice:
		"""
		Update an invoice. When items are given they replace all existing items.

		Totals are recomputed from the resulting items and VAT percent on every
		update, in the same transaction as the change.
		"""
		with self.db.session_scope() as s:
			inv = self._owned(s, Invoice, invoice_id, "Invoice")
			if invoice_number is not None:
				number = invoice_number.strip()
				if not number:
					raise ValueError("Invoice number is required")
				self._check_unique_number(s, number, exclude_id=inv.id)
				inv.invoice_number = number
			if invoice_date is not None:
				inv.invoice_date = invoice_date
			if client_id is not None:
				self._owned(s, Client, client_id, "Client")
				inv.client_id = client_id
			if is_paid is not None:
				inv.is_paid = bool(is_paid)
			if notes is not _UNSET:
				inv.notes = notes
			if vat_percent is not None:
				inv.vat_percent = float(to_decimal(vat_percent))

			if items is not None:
				line_items = [_as_line_item(it) for it in items]
				self._check_projects(s, line_items)
				s.exec(delete(InvoiceItem).where(InvoiceItem.invoice_id == inv.id))
				self._write_items(s, inv.id, line_items)
			else:
				line_items = self._items_for(s, inv.id)

			_apply_totals(inv, compute_totals(line_items, inv.vat_percent))
			s.add(inv)
			s.flush()
			return _invoice_record(inv)

	def set_invoice_items(self, invoice_id: int, items: Iterable[Any]) -> records.Invoice:
		return self.update_invoice(invoice_id, items=items)

	def set_vat_percent(self, invoice_id: int, vat_percent: Any) -> records.Invoice:
		return self.update_invoice(invoice_id, vat_percent=to_decimal(vat_percent))

	def mark_paid(self, invoice_id: int, paid: bool = True) -> records.Invoice:
		with self.db.session_scope() as s:
			inv = self._owned(s, Invoice, invoice_id, "Invoice")
			inv.is_paid = bool(paid)
			s.add(inv)
			return _invoice_record(inv)

	def get_invoice(self, invoice_id: int) -> records.Invoice:
		with self.db.get_session() as s:
			return _invoice_record(self._owned(s, Invoice, invoice_id, "Invoice"))

	def get_invoice_by_number(self, number: str) -> records.Invoice:
		with self.db.get_session() as s:
			row = s.exec(
				select(Invoice).where(Invoice.owner_id == self.owner_id, Invoice.invoice_number == number)
			).first()
			if row is None:
				raise NotFoundError("Invoice", number)
			return _invoice_record(row)

	def get_invoice_items(self, invoice_id: int) -> List[records.LineItem]:
		with self.db.get_session() as s:
			self._owned(s, Invoice, invoice_id, "Invoice")
			return self._items_for(s, invoice_id)

	def list_invoices(
		self,
		is_paid: Optional[bool] = None,
		client_id: Optional[int] = None,
		query: str = "",
		limit: Optional[int] = None,
	) -> List[InvoiceListRow]:
		"""Invoices with client name, newest invoice date first.

		query matches invoice number or client name, case-insensitive.
		"""
		q = (query or "").strip().lower()
		with self.db.get_session() as s:
			stmt = (
				select(Invoice, Client.name)
				.join(Client, Client.id == Invoice.client_id, isouter=True)
				.where(Invoice.owner_id == self.owner_id)
			)
			if is_paid is not None:
				stmt = stmt.where(Invoice.is_paid == bool(is_paid))
			if client_id is not None:
				stmt = stmt.where(Invoice.client_id == client_id)
			if q:
				like = f"%{q}%"
				stmt = stmt.where(
					(func.lower(Invoice.invoice_number).like(like))
					| (func.lower(Client.name).like(like))
				)
			stmt = stmt.order_by(Invoice.invoice_date.desc(), Invoice.id.desc())
			if isinstance(limit, int) and limit > 0:
				stmt = stmt.limit(limit)
			return [InvoiceListRow(_invoice_record(inv), name) for inv, name in s.exec(stmt).all()]

	def invoice_numbers(self) -> List[str]:
		with self.db.get_session() as s:
			return list(s.exec(select(Invoice.invoice_number).where(Invoice.owner_id == self.owner_id)).all())

	def delete_invoice(self, invoice_id: int) -> int:
		"""Delete a single invoice and all of its items. Returns 1 if deleted, 0 if not found."""
		with self.db.session_scope() as s:
			inv = s.get(Invoice, invoice_id)
			if inv is None or inv.owner_id != self.owner_id:
				return 0
			s.exec(delete(InvoiceItem).where(InvoiceItem.invoice_id == invoice_id))
			s.delete(inv)
			s.flush()
			return 1

	def load_invoice_bundle(self, invoice_id: int) -> InvoiceBundle:
		"""Load invoice, items, client and (possibly missing) company settings in one session."""
		with self.db.get_session() as s:
			inv = self._owned(s, Invoice, invoice_id, "Invoice")
			client = self._owned(s, Client, inv.client_id, "Client")
			settings = s.exec(select(CompanySettings).where(CompanySettings.owner_id == self.owner_id)).first()
			return InvoiceBundle(
				invoice=_invoice_record(inv),
				items=self._items_for(s, inv.id),
				client=_client_record(client),
				company_settings=_settings_record(settings) if settings is not None else None,
			)

	# ----- aggregates -----

	def _count(self, s: Session, model: type) -> int:
		return int(s.exec(select(func.count()).select_from(model).where(model.owner_id == self.owner_id)).one())

	def _sum_totals(self, s: Session, paid: bool) -> Decimal:
		value = s.exec(
			select(func.coalesce(func.sum(Invoice.total), 0.0))
			.where(Invoice.owner_id == self.owner_id, Invoice.is_paid == paid)
		).one()
		# SQLite sums REAL columns; cents are exact again after rounding
		return round_money(value)

	def dashboard_summary(self) -> DashboardSummary:
		with self.db.get_session() as s:
			return DashboardSummary(
				client_count=self._count(s, Client),
				project_count=self._count(s, Project),
				invoice_count=self._count(s, Invoice),
				paid_revenue=self._sum_totals(s, True),
				outstanding_amount=self._sum_totals(s, False),
			)

	def upcoming_payments(self, today: date, limit: Optional[int] = None) -> List[UpcomingPayment]:
		"""Unpaid invoices by due date (invoice date + 14 days), with days overdue."""
		rows = self.list_invoices(is_paid=False)
		out = [
			UpcomingPayment(
				invoice_id=r.invoice.id,  # type: ignore[arg-type]
				invoice_number=r.invoice.invoice_number,
				client_name=r.client_name,
				total=r.invoice.total,
				due_date=due_date(r.invoice.invoice_date),  # type: ignore[arg-type]
				days_overdue=days_overdue(r.invoice.invoice_date, today),
			)
			for r in rows
		]
		out.sort(key=lambda p: (p.due_date, p.invoice_number))
		if isinstance(limit, int) and limit > 0:
			out = out[:limit]
		return out

	def top_clients(self, limit: int = 5) -> List[Tuple[str, Decimal]]:
		"""Paid revenue per client, highest first."""
		revenue = func.sum(Invoice.total)
		with self.db.get_session() as s:
			stmt = (
				select(Client.name, revenue)
				.select_from(Invoice)
				.join(Client, Client.id == Invoice.client_id)
				.where(Invoice.owner_id == self.owner_id, Invoice.is_paid == True)  # noqa: E712
				.group_by(Client.id, Client.name)
				.order_by(revenue.desc(), Client.name.asc())
				.limit(limit)
			)
			return [(name, round_money(total)) for name, total in s.exec(stmt).all()]
