# zzpadmin/documents/table_layout.py
from xml.sax.saxutils import escape

from reportlab.platypus import Paragraph, Table, TableStyle
from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm

from zzpadmin.documents.document import InvoiceDocument

# Column widths (in mm); Description absorbs the remainder
COL_W_PROJECT = 30 * mm
COL_W_QTY = 20 * mm
COL_W_PRICE = 30 * mm
COL_W_TOTAL = 30 * mm

HEAD_FILL = colors.HexColor("#F0F0F0")
GRID_COLOR = colors.HexColor("#BBBBBB")
TEXT_COLOR = colors.black

W_GRID = 0.5
FONT_SIZE = 9

PADDING_V = (3, 3)   # top, bottom
PADDING_H = (4, 4)   # left, right

TOTALS_LABEL_W = 40 * mm
TOTALS_VALUE_W = 35 * mm

_CELL_STYLE = ParagraphStyle("cell", fontName="Helvetica", fontSize=FONT_SIZE, leading=FONT_SIZE + 2)


def _col_widths(content_width: float) -> list[float]:
    fixed = COL_W_PROJECT + COL_W_QTY + COL_W_PRICE + COL_W_TOTAL
    # Ensure Description gets at least a practical minimum; use the remainder for exact fit
    desc = max(120.0, content_width - fixed)
    return [COL_W_PROJECT, desc, COL_W_QTY, COL_W_PRICE, COL_W_TOTAL]


def build_items_table(doc: InvoiceDocument, content_width: float) -> Table:
    """
    Line-item grid: Project, Description, Quantity, Unit price, Line total.
    Rows keep input order; the header row repeats on every page.
    """
    data: list[list[object]] = [list(doc.columns)]
    for project, description, qty, price, total in doc.rows:
        # Paragraph so long descriptions wrap inside their cell
        data.append([project, Paragraph(escape(description), _CELL_STYLE), qty, price, total])

    t = Table(data, colWidths=_col_widths(content_width), repeatRows=1)

    ts = TableStyle()
    ts.add("GRID", (0, 0), (-1, -1), W_GRID, GRID_COLOR)
    ts.add("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold")
    ts.add("FONTNAME", (0, 1), (-1, -1), "Helvetica")
    ts.add("FONTSIZE", (0, 0), (-1, -1), FONT_SIZE)
    ts.add("TEXTCOLOR", (0, 0), (-1, -1), TEXT_COLOR)
    ts.add("BACKGROUND", (0, 0), (-1, 0), HEAD_FILL)
    ts.add("ALIGN", (2, 0), (4, -1), "RIGHT")  # Quantity, Unit price, Total

    # Padding
    ts.add("LEFTPADDING",  (0, 0), (-1, -1), PADDING_H[0])
    ts.add("RIGHTPADDING", (0, 0), (-1, -1), PADDING_H[1])
    ts.add("TOPPADDING",   (0, 0), (-1, -1), PADDING_V[0])
    ts.add("BOTTOMPADDING", (0, 0), (-1, -1), PADDING_V[1])
    ts.add("VALIGN", (0, 0), (-1, -1), "TOP")

    t.setStyle(ts)
    return t


def build_totals_table(doc: InvoiceDocument) -> Table:
    """Subtotal, VAT and grand total, right-aligned; emphasized lines in bold."""
    data = [[f"{line.label}:", line.value] for line in doc.totals]
    t = Table(data, colWidths=[TOTALS_LABEL_W, TOTALS_VALUE_W], hAlign="RIGHT")

    ts = TableStyle()
    ts.add("FONTNAME", (0, 0), (-1, -1), "Helvetica")
    ts.add("FONTSIZE", (0, 0), (-1, -1), FONT_SIZE + 1)
    ts.add("ALIGN", (1, 0), (1, -1), "RIGHT")
    for i, line in enumerate(doc.totals):
        if line.emphasis:
            ts.add("FONTNAME", (0, i), (-1, i), "Helvetica-Bold")
            ts.add("LINEABOVE", (0, i), (-1, i), 0.8, TEXT_COLOR)
    ts.add("TOPPADDING", (0, 0), (-1, -1), 2)
    ts.add("BOTTOMPADDING", (0, 0), (-1, -1), 2)

    t.setStyle(ts)
    return t
