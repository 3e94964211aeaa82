from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional

# Due date shown on invoices; payment terms text is informational only
PAYMENT_TERM_DAYS = 14


def to_date(val: Any) -> Optional[date]:
	"""Accept date, datetime or ISO string ("2023-01-15" / "2023-01-15T10:00:00")."""
	if val is None:
		return None
	if isinstance(val, datetime):
		return val.date()
	if isinstance(val, date):
		return val
	s = str(val).strip()
	if not s:
		return None
	try:
		return date.fromisoformat(s[:10])
	except ValueError:
		return None


def fmt_date(val: Any) -> str:
	"""Format as dd-mm-yyyy (nl-NL); unparseable values are rendered as given."""
	d = to_date(val)
	if d is None:
		return str(val) if val is not None else ""
	return d.strftime("%d-%m-%Y")


def due_date(invoice_date: Any, days: int = PAYMENT_TERM_DAYS) -> Optional[date]:
	d = to_date(invoice_date)
	return d + timedelta(days=days) if d is not None else None


def days_overdue(invoice_date: Any, today: date) -> int:
	"""Whole days past the due date; 0 when not yet due."""
	due = due_date(invoice_date)
	if due is None:
		return 0
	return max(0, (today - due).days)
