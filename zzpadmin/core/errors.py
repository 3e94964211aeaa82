from __future__ import annotations


class MissingEntityError(ValueError):
	"""A required record (invoice, client) was not supplied to the renderer."""

	def __init__(self, entity: str) -> None:
		super().__init__(f"{entity} is required to render an invoice")
		self.entity = entity


class NotFoundError(LookupError):
	"""No record with this id exists for the current owner."""

	def __init__(self, kind: str, record_id: object) -> None:
		super().__init__(f"{kind} not found: {record_id}")
		self.kind = kind
		self.record_id = record_id


class DuplicateInvoiceNumberError(ValueError):
	def __init__(self, number: str) -> None:
		super().__init__(f"Invoice number already exists: {number}")
		self.number = number


class ExportError(RuntimeError):
	"""Neither the PDF nor the HTML fallback could be written."""
