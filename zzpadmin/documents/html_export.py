from __future__ import annotations

from html import escape
from typing import Iterable, List

from zzpadmin.documents.document import InvoiceDocument

STYLE = """
    body { font-family: Arial, sans-serif; margin: 0; padding: 20px; color: #333; }
    .invoice-header { display: flex; justify-content: space-between; margin-bottom: 30px; }
    .company-info { margin-bottom: 20px; }
    .blocks { display: flex; gap: 20px; }
    .invoice-details, .client-details { flex: 1; background-color: #f5f5f5; padding: 15px; margin-bottom: 20px; }
    table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
    th, td { padding: 10px; text-align: left; border-bottom: 1px solid #ddd; }
    th { background-color: #f5f5f5; }
    .text-right { text-align: right; }
    .totals { margin-left: auto; width: 300px; }
    .totals table { margin-bottom: 0; }
    .payment-info { margin-top: 30px; }
    .footer { margin-top: 50px; text-align: center; font-size: 12px; color: #777; }
"""

# Quantity, unit price and line total are right-aligned
_NUMERIC_COLUMNS = (2, 3, 4)


def _e(text: str) -> str:
    return escape(text, quote=True)


def _br(lines: Iterable[str]) -> str:
    return "<br>".join(_e(ln) for ln in lines)


def _cell(tag: str, text: str, index: int) -> str:
    cls = ' class="text-right"' if index in _NUMERIC_COLUMNS else ""
    return f"<{tag}{cls}>{_e(text)}</{tag}>"


def render_html(doc: InvoiceDocument) -> str:
    """Serialize the document to a standalone HTML page (UTF-8, inline CSS)."""
    out: List[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{_e(doc.title)}</title>",
        f"<style>{STYLE}</style>",
        "</head>",
        "<body>",
        '<div class="invoice-header">',
        "<div>",
        f"<h1>{_e(doc.company_name)}</h1>",
    ]
    if doc.company_lines:
        out.append(f'<div class="company-info">{_br(doc.company_lines)}</div>')
    out += [
        "</div>",
        f"<div><h2>{_e(doc.heading)}</h2></div>",
        "</div>",
        '<div class="blocks">',
        '<div class="invoice-details">',
        f"<h3>{_e(doc.details_heading)}</h3>",
    ]
    out += [f"<p>{_e(label)}: {_e(value)}</p>" for label, value in doc.metadata]
    out += [
        "</div>",
        '<div class="client-details">',
        f"<h3>{_e(doc.client_heading)}</h3>",
        f"<p>{_e(doc.client_name)}</p>",
    ]
    out += [f"<p>{_e(ln)}</p>" for ln in doc.client_lines]
    out += [
        "</div>",
        "</div>",
        f"<h3>{_e(doc.items_heading)}</h3>",
        "<table>",
        "<thead>",
        "<tr>" + "".join(_cell("th", c, i) for i, c in enumerate(doc.columns)) + "</tr>",
        "</thead>",
        "<tbody>",
    ]
    for row in doc.rows:
        out.append("<tr>" + "".join(_cell("td", c, i) for i, c in enumerate(row)) + "</tr>")
    out += [
        "</tbody>",
        "</table>",
        '<div class="totals">',
        "<table>",
    ]
    for line in doc.totals:
        label, value = _e(line.label) + ":", _e(line.value)
        if line.emphasis:
            label, value = f"<strong>{label}</strong>", f"<strong>{value}</strong>"
        out.append(f'<tr><td>{label}</td><td class="text-right">{value}</td></tr>')
    out += [
        "</table>",
        "</div>",
        '<div class="payment-info">',
        f"<h3>{_e(doc.payment_heading)}</h3>",
        f"<p>{_br(doc.payment_text.splitlines() or [''])}</p>",
        "</div>",
        f'<div class="footer"><p>{_e(doc.footer)}</p></div>',
        "</body>",
        "</html>",
    ]
    return "\n".join(out) + "\n"
