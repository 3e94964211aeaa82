from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from zzpadmin.core.errors import MissingEntityError
from zzpadmin.core.records import Client, CompanySettings, Invoice

FALLBACK_SENDER = "Our Company"


@dataclass(frozen=True)
class EmailDraft:
    to: str
    subject: str
    message: str
    attachment_name: str


def compose_invoice_email(
    invoice: Optional[Invoice],
    client: Optional[Client],
    company_settings: Optional[CompanySettings],
) -> EmailDraft:
    """Prefilled e-mail for sending an invoice; delivery itself happens elsewhere."""
    if invoice is None:
        raise MissingEntityError("invoice")
    if client is None:
        raise MissingEntityError("client")
    sender = (company_settings.company_name if company_settings else None) or FALLBACK_SENDER
    number = invoice.invoice_number
    message = (
        f"Dear {client.name},\n\n"
        f"Please find attached invoice {number}.\n\n"
        "Thank you for your business.\n\n"
        "Best regards,\n"
        f"{sender}"
    )
    return EmailDraft(
        to=client.email or "",
        subject=f"Invoice {number} from {sender}",
        message=message,
        attachment_name=f"Invoice-{number}.pdf",
    )
