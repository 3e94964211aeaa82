from __future__ import annotations

import pytest

from zzpadmin.core.errors import MissingEntityError
from zzpadmin.core.records import Client, CompanySettings
from zzpadmin.documents.email_draft import compose_invoice_email


def test_draft_fields(invoice, client_record, company) -> None:
    draft = compose_invoice_email(invoice, client_record, company)
    assert draft.to == "info@amsterdam.nl"
    assert draft.subject == "Invoice F0001 from Groen & Zn B.V."
    assert draft.attachment_name == "Invoice-F0001.pdf"
    assert draft.message.startswith("Dear Gemeente Amsterdam,\n\n")
    assert draft.message.endswith("Best regards,\nGroen & Zn B.V.")


def test_draft_without_company_name(invoice) -> None:
    draft = compose_invoice_email(invoice, Client(name="Jan"), CompanySettings())
    assert draft.subject == "Invoice F0001 from Our Company"
    assert draft.to == ""


def test_draft_requires_invoice_and_client(invoice, client_record) -> None:
    with pytest.raises(MissingEntityError):
        compose_invoice_email(None, client_record, None)
    with pytest.raises(MissingEntityError):
        compose_invoice_email(invoice, None, None)
