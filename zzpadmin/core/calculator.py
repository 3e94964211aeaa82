from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Any, Iterable, Mapping

from zzpadmin.core.currency import MONEY_CONTEXT, ZERO, finite_or_zero, non_negative, round_money, to_decimal


@dataclass(frozen=True)
class InvoiceTotals:
	subtotal: Decimal
	vat_amount: Decimal
	total: Decimal

	def rounded(self) -> "InvoiceTotals":
		"""Cent-rounded copy for persistence; total stays subtotal + VAT exactly."""
		sub = round_money(self.subtotal)
		vat = round_money(self.vat_amount)
		with localcontext(MONEY_CONTEXT):
			total = sub + vat
		if not total.is_finite():
			return InvoiceTotals(subtotal=ZERO, vat_amount=ZERO, total=ZERO)
		return InvoiceTotals(subtotal=sub, vat_amount=vat, total=total)


def _field(item: Any, name: str) -> Any:
	if item is None:
		return None
	if isinstance(item, Mapping):
		return item.get(name)
	return getattr(item, name, None)


def line_total(item: Any) -> Decimal:
	"""quantity x unit_price, each coerced to 0 when missing, negative or not a number.

	A precomputed "total" on the item is never trusted, and a product too large
	for MONEY_CONTEXT counts as 0 like any other malformed item.
	"""
	quantity = non_negative(_field(item, "quantity"))
	unit_price = non_negative(_field(item, "unit_price"))
	with localcontext(MONEY_CONTEXT):
		product = quantity * unit_price
	return finite_or_zero(product)


def compute_totals(line_items: Iterable[Any], vat_percent: Any) -> InvoiceTotals:
	"""Derive subtotal, VAT amount and grand total for an invoice.

	Every call recomputes from scratch in input order; there is no incremental
	update path. Items may be LineItem records, mappings or any object with
	quantity/unit_price attributes. The VAT percent is not clamped, so a negative
	rate lowers the total below the subtotal.

	Arithmetic runs in MONEY_CONTEXT and never raises; an invoice whose amounts
	do not fit in it gets zero totals.
	"""
	with localcontext(MONEY_CONTEXT):
		subtotal = ZERO
		for item in line_items or ():
			subtotal += line_total(item)
		vat_amount = subtotal * to_decimal(vat_percent) / Decimal(100)
		total = subtotal + vat_amount
	if not (subtotal.is_finite() and vat_amount.is_finite() and total.is_finite()):
		return InvoiceTotals(subtotal=ZERO, vat_amount=ZERO, total=ZERO)
	return InvoiceTotals(subtotal=subtotal, vat_amount=vat_amount, total=total)
