from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Labels:
    code: str
    title: str
    heading: str
    details_heading: str
    invoice_number: str
    invoice_date: str
    due_date: str
    status: str
    paid: str
    unpaid: str
    client_heading: str
    items_heading: str
    col_project: str
    col_description: str
    col_quantity: str
    col_unit_price: str
    col_total: str
    subtotal: str
    vat: str  # formatted with {percent}
    total: str
    payment_heading: str
    payment_default: str  # formatted with {iban}, {number}, {company}
    page: str  # formatted with {company}, {page}, {pages}
    phone: str = "Tel"
    email: str = "Email"
    kvk: str = "KVK"
    btw: str = "BTW"
    iban: str = "IBAN"


DUTCH = Labels(
    code="nl",
    title="Factuur",
    heading="FACTUUR",
    details_heading="FACTUURGEGEVENS",
    invoice_number="Factuurnummer",
    invoice_date="Factuurdatum",
    due_date="Vervaldatum",
    status="Status",
    paid="Betaald",
    unpaid="Openstaand",
    client_heading="KLANTGEGEVENS",
    items_heading="FACTUURITEMS",
    col_project="Project",
    col_description="Omschrijving",
    col_quantity="Uren",
    col_unit_price="Tarief",
    col_total="Bedrag",
    subtotal="Subtotaal",
    vat="BTW ({percent}%)",
    total="Totaal",
    payment_heading="BETALINGSINFORMATIE",
    payment_default=(
        "Gelieve binnen 14 dagen te voldoen op rekeningnummer {iban} onder vermelding "
        "van factuurnummer {number}, ten name van {company}."
    ),
    page="{company} - Pagina {page} van {pages}",
)

ENGLISH = Labels(
    code="en",
    title="Invoice",
    heading="INVOICE",
    details_heading="INVOICE DETAILS",
    invoice_number="Invoice Number",
    invoice_date="Date",
    due_date="Due Date",
    status="Status",
    paid="Paid",
    unpaid="Unpaid",
    client_heading="BILL TO",
    items_heading="INVOICE ITEMS",
    col_project="Project",
    col_description="Description",
    col_quantity="Quantity",
    col_unit_price="Unit Price",
    col_total="Total",
    subtotal="Subtotal",
    vat="VAT ({percent}%)",
    total="Total",
    payment_heading="PAYMENT INFORMATION",
    payment_default="Please pay within 14 days to {iban} referencing invoice number {number}.",
    page="{company} - Page {page} of {pages}",
    phone="Phone",
    kvk="Reg. No",
    btw="VAT No",
)

LABEL_SETS = {DUTCH.code: DUTCH, ENGLISH.code: ENGLISH}


def get_labels(code: str | Labels) -> Labels:
    if isinstance(code, Labels):
        return code
    try:
        return LABEL_SETS[str(code).lower()]
    except KeyError:
        raise ValueError(f"Unknown label set: {code!r} (expected one of {sorted(LABEL_SETS)})") from None
