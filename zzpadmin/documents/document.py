"""
Invoice document model.

render_invoice() turns already-computed records into an InvoiceDocument: a
page model of formatted strings in fixed reading order. The HTML and PDF
backends only lay it out; they never format or compute amounts themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from zzpadmin.core.currency import fmt_money, fmt_number
from zzpadmin.core.dates import due_date, fmt_date
from zzpadmin.core.errors import MissingEntityError
from zzpadmin.core.records import (
    DEFAULT_COMPANY_SETTINGS,
    Client,
    CompanySettings,
    Invoice,
    LineItem,
)
from zzpadmin.documents.labels import Labels, get_labels

PLACEHOLDER = "-"


@dataclass(frozen=True)
class TotalLine:
    label: str
    value: str
    emphasis: bool = False


@dataclass(frozen=True)
class InvoiceDocument:
    labels: Labels
    title: str
    company_name: str
    company_lines: Tuple[str, ...]
    heading: str
    details_heading: str
    metadata: Tuple[Tuple[str, str], ...]
    client_heading: str
    client_name: str
    client_lines: Tuple[str, ...]
    items_heading: str
    columns: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    totals: Tuple[TotalLine, ...]
    payment_heading: str
    payment_text: str
    footer: str

    def page_footer(self, page: int, pages: int) -> str:
        return self.labels.page.format(company=self.footer, page=page, pages=pages)

    def to_html(self) -> str:
        from zzpadmin.documents.html_export import render_html  # local import avoids a cycle

        return render_html(self)


def _lines(text: Optional[str]) -> list[str]:
    return [ln.rstrip() for ln in (text or "").splitlines() if ln.strip()]


def _company_block(settings: CompanySettings, labels: Labels) -> Tuple[str, ...]:
    lines = _lines(settings.address)
    for label, value in (
        (labels.phone, settings.phone),
        (labels.email, settings.email),
        (labels.kvk, settings.kvk_number),
        (labels.btw, settings.btw_number),
        (labels.iban, settings.iban),
    ):
        if value:
            lines.append(f"{label}: {value}")
    return tuple(lines)


def _client_block(client: Client, labels: Labels) -> Tuple[str, ...]:
    lines = _lines(client.address)
    if client.kvk_number:
        lines.append(f"{labels.kvk}: {client.kvk_number}")
    if client.btw_number:
        lines.append(f"{labels.btw}: {client.btw_number}")
    return tuple(lines)


def _item_row(item: LineItem) -> Tuple[str, ...]:
    return (
        item.project_number or PLACEHOLDER,
        item.description.strip() or PLACEHOLDER,
        fmt_number(item.quantity),
        fmt_money(item.unit_price),
        fmt_money(item.total),
    )


def _payment_text(invoice: Invoice, settings: CompanySettings, labels: Labels) -> str:
    if settings.payment_terms:
        return settings.payment_terms
    return labels.payment_default.format(
        iban=settings.iban or "",
        number=invoice.invoice_number,
        company=settings.display_name,
    )


def render_invoice(
    invoice: Optional[Invoice],
    line_items: Iterable[LineItem],
    client: Optional[Client],
    company_settings: Optional[CompanySettings],
    *,
    labels: str | Labels = "nl",
) -> InvoiceDocument:
    """
    Build the printable document for one invoice.

    Totals are taken from the invoice as stored (see compute_totals); nothing is
    recomputed here. Missing company settings are replaced by
    DEFAULT_COMPANY_SETTINGS and absent optional fields are left out, but a
    missing invoice or client raises MissingEntityError.
    """
    if invoice is None:
        raise MissingEntityError("invoice")
    if client is None:
        raise MissingEntityError("client")
    lab = get_labels(labels)
    settings = company_settings if company_settings is not None else DEFAULT_COMPANY_SETTINGS

    metadata = (
        (lab.invoice_number, invoice.invoice_number),
        (lab.invoice_date, fmt_date(invoice.invoice_date)),
        (lab.due_date, fmt_date(due_date(invoice.invoice_date))),
        (lab.status, lab.paid if invoice.is_paid else lab.unpaid),
    )
    totals = (
        TotalLine(lab.subtotal, fmt_money(invoice.subtotal)),
        TotalLine(lab.vat.format(percent=fmt_number(invoice.vat_percent)), fmt_money(invoice.vat_amount)),
        TotalLine(lab.total, fmt_money(invoice.total), emphasis=True),
    )

    return InvoiceDocument(
        labels=lab,
        title=f"{lab.title} {invoice.invoice_number}",
        company_name=settings.display_name,
        company_lines=_company_block(settings, lab),
        heading=lab.heading,
        details_heading=lab.details_heading,
        metadata=metadata,
        client_heading=lab.client_heading,
        client_name=client.name,
        client_lines=_client_block(client, lab),
        items_heading=lab.items_heading,
        columns=(lab.col_project, lab.col_description, lab.col_quantity, lab.col_unit_price, lab.col_total),
        rows=tuple(_item_row(it) for it in line_items or ()),
        totals=totals,
        payment_heading=lab.payment_heading,
        payment_text=_payment_text(invoice, settings, lab),
        footer=settings.display_name,
    )
