from __future__ import annotations

import logging
import os
import re
import subprocess
import sys
from pathlib import Path

from zzpadmin.core.errors import ExportError
from zzpadmin.documents.document import InvoiceDocument

logger = logging.getLogger(__name__)

FORMATS = ("pdf", "html")


def safe_file_name(name: str) -> str:
    """Strip characters that are not allowed in Windows/macOS/Linux file names."""
    cleaned = re.sub(r'[<>:"/\\|?*\x00-\x1f]+', "_", name).strip(" .")
    return cleaned or "invoice"


def default_file_name(doc: InvoiceDocument, fmt: str = "pdf") -> str:
    return f"{safe_file_name(doc.title)}.{fmt}"


def _write_html(doc: InvoiceDocument, path: Path) -> Path:
    path.write_text(doc.to_html(), encoding="utf-8", newline="\n")
    return path


def export_invoice(doc: InvoiceDocument, target: Path | str, fmt: str = "pdf") -> Path:
    """
    Write the document to target and return the path actually written.

    A directory target gets the default file name. PDF is rendered with reportlab;
    if that fails, or reportlab cannot be imported, the HTML version is written
    next to it instead (same stem, .html suffix). Raises ExportError when nothing
    could be written.
    """
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    target = Path(target)
    if target.is_dir():
        target = target / default_file_name(doc, fmt)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Cannot create folder {target.parent}: {e}") from e

    if fmt == "pdf":
        try:
            # reportlab is only needed here; HTML export works without it
            from zzpadmin.documents.pdf_draw import build_invoice_pdf

            target.write_bytes(build_invoice_pdf(doc))
            logger.info("Wrote PDF %s", target)
            return target
        except Exception:
            logger.exception("PDF export failed for %s; writing HTML instead", target)
            target = target.with_suffix(".html")

    try:
        _write_html(doc, target)
    except OSError as e:
        raise ExportError(f"Could not write {target}: {e}") from e
    logger.info("Wrote HTML %s", target)
    return target


def open_file(path: Path | str) -> bool:
    """Open a file with the platform's default viewer; False when that fails."""
    path = str(path)
    try:
        if sys.platform == "win32":
            os.startfile(path)  # type: ignore[attr-defined]
        else:
            opener = "open" if sys.platform == "darwin" else "xdg-open"
            # Not waited on, like os.startfile: the viewer outlives this process
            subprocess.Popen([opener, path])
        return True
    except Exception:
        logger.exception("Failed to open file: %s", path)
        return False
