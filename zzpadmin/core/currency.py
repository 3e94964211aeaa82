from __future__ import annotations

from decimal import Context, Decimal, ROUND_HALF_UP, InvalidOperation, localcontext
from typing import Optional, Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0")

# All money arithmetic runs in this context. Any finite value in it fits in
# prec when quantized to cents; results beyond Emax become Infinity instead of
# raising, and are then treated like any other non-finite input. Enter it
# through localcontext() so the shared instance never collects flags.
MONEY_CONTEXT = Context(prec=60, rounding=ROUND_HALF_UP, Emax=40, Emin=-40, traps=[])

# nl-NL euro formatting: "€", no-break space, "." thousands, "," decimals
CURRENCY_SYMBOL = "€"
NBSP = "\u00a0"


def finite_or_zero(d: Decimal) -> Decimal:
	return d if d.is_finite() else ZERO


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts.

	Anything that is not a finite number in MONEY_CONTEXT (None, "abc", NaN,
	inf, bools, "1e999") becomes 0.
	"""
	if x is None or isinstance(x, bool):
		return ZERO
	if isinstance(x, Decimal):
		d = x
	else:
		try:
			d = Decimal(str(x).strip())
		except (InvalidOperation, ValueError, TypeError):
			return ZERO
	if not d.is_finite():
		return ZERO
	with localcontext(MONEY_CONTEXT):
		d = +d
	return finite_or_zero(d)


def non_negative(x: object) -> Decimal:
	"""Coerce to Decimal and clamp negatives to zero (quantities and prices)."""
	d = to_decimal(x)
	return d if d > 0 else ZERO


def round_money(x: object) -> Decimal:
	"""Round to cents, half away from zero (the rounding used for display)."""
	d = to_decimal(x)
	with localcontext(MONEY_CONTEXT):
		return d.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[object]) -> Decimal:
	"""Accumulate monetary values in order using exact Decimal arithmetic."""
	total = ZERO
	with localcontext(MONEY_CONTEXT):
		for v in values:
			total += to_decimal(v)
	return finite_or_zero(total)


def _group_thousands(digits: str, sep: str = ".") -> str:
	head = len(digits) % 3 or 3
	parts = [digits[:head]]
	for i in range(head, len(digits), 3):
		parts.append(digits[i:i + 3])
	return sep.join(parts)


def fmt_money(x: object, width: Optional[int] = None) -> str:
	"""
	Format a euro amount the nl-NL way, e.g. "€ 1.234,56" and "€ -12,50".

	None and non-numeric input render as "€ 0,00". If width is provided, return a
	right-aligned string.
	"""
	q = round_money(x)
	sign = "-" if q < 0 else ""
	whole, _, frac = f"{q.copy_abs():.2f}".partition(".")
	s = f"{CURRENCY_SYMBOL}{NBSP}{sign}{_group_thousands(whole)},{frac}"
	return s.rjust(width) if isinstance(width, int) and width > 0 else s


def fmt_number(x: object) -> str:
	"""Plain decimal rendering without trailing zeros: 80, 1.5, 21."""
	d = to_decimal(x)
	with localcontext(MONEY_CONTEXT):
		d = d.normalize()
	return format(d, "f")
