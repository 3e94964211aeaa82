from __future__ import annotations

from typing import Iterable, Protocol


class _HasInvoiceNumbers(Protocol):
	def invoice_numbers(self) -> list[str]: ...


def _format(prefix: str, n: int, width: int = 4) -> str:
	return f"{prefix}{n:0{width}d}"


def last_sequence(prefix: str, numbers: Iterable[str]) -> int:
	"""Highest numeric suffix among numbers starting with prefix (0 if none)."""
	last = 0
	for number in numbers:
		if not number or not number.startswith(prefix):
			continue
		suffix = number[len(prefix):]
		if suffix.isdigit():
			last = max(last, int(suffix))
	return last


def peek_next_invoice_number(repo: _HasInvoiceNumbers, prefix: str) -> str:
	"""
	Return the next invoice number like 'F0001' for the repository's owner.

	Derived from existing invoice numbers, so nothing is reserved; the unique
	(owner, number) constraint catches a concurrent duplicate on save.
	"""
	return _format(prefix, last_sequence(prefix, repo.invoice_numbers()) + 1)
