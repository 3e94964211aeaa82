from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, List
from xml.sax.saxutils import escape

from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas

from zzpadmin.documents.document import InvoiceDocument
from zzpadmin.documents.table_layout import HEAD_FILL, build_items_table, build_totals_table

# ===== Layout constants (tweak here) =====
PAGE_SIZE = A4
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE

MARGIN_LEFT = 20 * mm
MARGIN_RIGHT = 20 * mm
MARGIN_TOP = 20 * mm
MARGIN_BOTTOM = 22 * mm

CONTENT_WIDTH = PAGE_WIDTH - MARGIN_LEFT - MARGIN_RIGHT
FOOTER_Y = 12 * mm

TEXT_COLOR = colors.black
MUTED_COLOR = colors.HexColor("#646464")

COMPANY_FONT_SIZE = 16
HEADING_FONT_SIZE = 14
TEXT_FONT_SIZE = 9
FOOTER_FONT_SIZE = 8

STYLE_COMPANY = ParagraphStyle("company", fontName="Helvetica-Bold", fontSize=COMPANY_FONT_SIZE, leading=COMPANY_FONT_SIZE + 4)
STYLE_HEADING = ParagraphStyle("heading", fontName="Helvetica-Bold", fontSize=HEADING_FONT_SIZE, leading=HEADING_FONT_SIZE + 4, alignment=2)
STYLE_SMALL = ParagraphStyle("small", fontName="Helvetica", fontSize=TEXT_FONT_SIZE, leading=TEXT_FONT_SIZE + 3, textColor=MUTED_COLOR)
STYLE_TEXT = ParagraphStyle("text", fontName="Helvetica", fontSize=TEXT_FONT_SIZE, leading=TEXT_FONT_SIZE + 3)
STYLE_SECTION = ParagraphStyle("section", fontName="Helvetica-Bold", fontSize=TEXT_FONT_SIZE + 1, leading=TEXT_FONT_SIZE + 5, spaceAfter=2)


def _para(lines: List[str], style: ParagraphStyle) -> Paragraph:
    return Paragraph("<br/>".join(escape(ln) for ln in lines), style)


class _NumberedCanvas(Canvas):
    """Canvas that defers page output until the page count is known.

    Subclasses set footer_for(page, pages) -> str.
    """

    footer_for: Callable[[int, int], str]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict] = []

    def showPage(self):  # type: ignore[override]
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):  # type: ignore[override]
        pages = len(self._saved_page_states)
        for page, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            self._draw_footer(page, pages)
            super().showPage()
        super().save()

    def _draw_footer(self, page: int, pages: int) -> None:
        self.saveState()
        self.setFont("Helvetica", FOOTER_FONT_SIZE)
        self.setFillColor(MUTED_COLOR)
        self.drawCentredString(PAGE_WIDTH / 2, FOOTER_Y, self.footer_for(page, pages))
        self.restoreState()


def _canvas_maker(doc: InvoiceDocument) -> type:
    class _InvoiceCanvas(_NumberedCanvas):
        footer_for = staticmethod(doc.page_footer)

    return _InvoiceCanvas


def _header(doc: InvoiceDocument) -> Table:
    left = [Paragraph(escape(doc.company_name), STYLE_COMPANY)]
    if doc.company_lines:
        left.append(_para(list(doc.company_lines), STYLE_SMALL))
    t = Table([[left, Paragraph(escape(doc.heading), STYLE_HEADING)]], colWidths=[CONTENT_WIDTH * 0.65, CONTENT_WIDTH * 0.35])
    t.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))
    return t


def _info_blocks(doc: InvoiceDocument) -> Table:
    """Invoice details and client details side by side on a light fill."""
    details = [Paragraph(escape(doc.details_heading), STYLE_SECTION)]
    details.append(_para([f"{label}: {value}" for label, value in doc.metadata], STYLE_TEXT))
    client = [Paragraph(escape(doc.client_heading), STYLE_SECTION)]
    client.append(_para([doc.client_name, *doc.client_lines], STYLE_TEXT))

    gap = 6 * mm
    col_w = (CONTENT_WIDTH - gap) / 2
    t = Table([[details, "", client]], colWidths=[col_w, gap, col_w])
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (0, 0), HEAD_FILL),
        ("BACKGROUND", (2, 0), (2, 0), HEAD_FILL),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
    ]))
    return t


def _story(doc: InvoiceDocument) -> list:
    return [
        _header(doc),
        Spacer(1, 8 * mm),
        _info_blocks(doc),
        Spacer(1, 8 * mm),
        Paragraph(escape(doc.items_heading), STYLE_SECTION),
        Spacer(1, 2 * mm),
        build_items_table(doc, CONTENT_WIDTH),
        Spacer(1, 6 * mm),
        build_totals_table(doc),
        Spacer(1, 10 * mm),
        Paragraph(escape(doc.payment_heading), STYLE_SECTION),
        _para(doc.payment_text.splitlines() or [""], STYLE_TEXT),
    ]


# ===== Public API =====
def build_invoice_pdf(doc: InvoiceDocument) -> bytes:
    """Lay out the document on A4 pages and return the PDF bytes.

    Built in reportlab's invariant mode, so the same document always yields the
    same bytes. Every page carries "<company> - Pagina i van n" in the footer.
    """
    buf = io.BytesIO()
    template = SimpleDocTemplate(
        buf,
        pagesize=PAGE_SIZE,
        leftMargin=MARGIN_LEFT,
        rightMargin=MARGIN_RIGHT,
        topMargin=MARGIN_TOP,
        bottomMargin=MARGIN_BOTTOM,
        title=doc.title,
        author=doc.company_name,
        subject=doc.labels.title,
        creator="zzpadmin",
        invariant=1,
    )
    template.build(_story(doc), canvasmaker=_canvas_maker(doc))
    return buf.getvalue()


def write_invoice_pdf(doc: InvoiceDocument, out_path: Path | str) -> Path:
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(build_invoice_pdf(doc))
    return out
