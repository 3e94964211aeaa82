from __future__ import annotations

import sys
from pathlib import Path

import pytest

from zzpadmin.documents import pdf_draw
from zzpadmin.documents.document import render_invoice
from zzpadmin.printing import export
from zzpadmin.printing.export import default_file_name, export_invoice, open_file, safe_file_name


@pytest.fixture
def doc(invoice, items, client_record, company):
    return render_invoice(invoice, items, client_record, company)


def test_export_pdf_to_folder(tmp_path: Path, doc) -> None:
    written = export_invoice(doc, tmp_path)
    assert written == tmp_path / "Factuur F0001.pdf"
    assert written.read_bytes().startswith(b"%PDF")


def test_export_html_to_file(tmp_path: Path, doc) -> None:
    target = tmp_path / "sub" / "f1.html"
    written = export_invoice(doc, target, fmt="HTML")
    assert written == target
    assert written.read_text(encoding="utf-8") == doc.to_html()


def test_pdf_failure_falls_back_to_html(tmp_path: Path, doc, monkeypatch, caplog) -> None:
    def broken(_doc):
        raise RuntimeError("no fonts")

    monkeypatch.setattr(pdf_draw, "build_invoice_pdf", broken)
    written = export_invoice(doc, tmp_path / "f1.pdf")
    assert written == tmp_path / "f1.html"
    assert "FACTUUR" in written.read_text(encoding="utf-8")
    assert not (tmp_path / "f1.pdf").exists()
    assert "PDF export failed" in caplog.text


def test_missing_pdf_backend_falls_back_to_html(tmp_path: Path, doc, monkeypatch) -> None:
    # None in sys.modules makes the import fail as if reportlab were absent
    monkeypatch.setitem(sys.modules, "zzpadmin.documents.pdf_draw", None)
    written = export_invoice(doc, tmp_path / "f1.pdf")
    assert written == tmp_path / "f1.html"
    assert written.read_text(encoding="utf-8") == doc.to_html()

    html = export_invoice(doc, tmp_path, fmt="html")
    assert html == tmp_path / "Factuur F0001.html"


def test_unsupported_format(tmp_path: Path, doc) -> None:
    with pytest.raises(ValueError):
        export_invoice(doc, tmp_path, fmt="docx")


def test_file_names() -> None:
    assert safe_file_name('Factuur 2023/07: "A"') == "Factuur 2023_07_ _A_"
    assert safe_file_name(" ..") == "invoice"


def test_default_file_name_english(invoice, items, client_record) -> None:
    doc = render_invoice(invoice, items, client_record, None, labels="en")
    assert default_file_name(doc, "html") == "Invoice F0001.html"


def test_open_file_starts_viewer_without_waiting(tmp_path: Path, monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(export.sys, "platform", "darwin")
    monkeypatch.setattr(export.subprocess, "Popen", lambda args: calls.append(args))
    assert open_file(tmp_path / "f1.pdf") is True
    assert calls == [["open", str(tmp_path / "f1.pdf")]]


def test_open_file_reports_failure(tmp_path: Path, monkeypatch, caplog) -> None:
    def missing(args):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(export.sys, "platform", "linux")
    monkeypatch.setattr(export.subprocess, "Popen", missing)
    assert open_file(tmp_path / "f1.pdf") is False
    assert "Failed to open file" in caplog.text
