from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from zzpadmin.core.currency import fmt_money
from zzpadmin.core.dates import fmt_date
from zzpadmin.core.errors import ExportError, MissingEntityError, NotFoundError
from zzpadmin.core.logging_setup import configure_logging
from zzpadmin.core.numbering import peek_next_invoice_number
from zzpadmin.core.settings import AppConfig, load_config, save_config
from zzpadmin.data.db import Database
from zzpadmin.data.repo import Repository
from zzpadmin.data.seed import seed_demo_data
from zzpadmin.documents.document import render_invoice
from zzpadmin.printing.export import FORMATS, export_invoice, open_file

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="zzpadmin", description="Clients, projects and invoices for a small business")
    p.add_argument("--config", type=Path, default=None, help="Path to config.json")
    p.add_argument("--owner", default=None, help="Owner id all records are scoped to")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database tables")
    sub.add_parser("seed-demo", help="Insert demo data for an owner without clients")

    exp = sub.add_parser("export", help="Render an invoice to PDF or HTML")
    which = exp.add_mutually_exclusive_group(required=True)
    which.add_argument("--invoice-id", type=int)
    which.add_argument("--number")
    exp.add_argument("--format", choices=FORMATS, default="pdf")
    exp.add_argument("--out", type=Path, default=None, help="File or folder (default: configured export_dir)")
    exp.add_argument("--labels", default=None, help="Label set: nl or en")
    exp.add_argument("--open", action="store_true", help="Open the written file")

    summ = sub.add_parser("summary", help="Dashboard totals and open payments")
    summ.add_argument("--today", type=date.fromisoformat, default=None)

    sub.add_parser("next-number", help="Suggest the next invoice number")
    return p


def _repo(db: Database, config: AppConfig, owner: Optional[str]) -> Repository:
    owner = owner or config.last_owner
    if not owner:
        raise ValueError("No owner given; pass --owner")
    return Repository(db, owner)


def _cmd_export(args: argparse.Namespace, repo: Repository, config: AppConfig) -> int:
    invoice_id = args.invoice_id
    if invoice_id is None:
        invoice_id = repo.get_invoice_by_number(args.number).id
    bundle = repo.load_invoice_bundle(invoice_id)
    doc = render_invoice(
        bundle.invoice,
        bundle.items,
        bundle.client,
        bundle.company_settings,
        labels=args.labels or config.labels,
    )
    target = args.out
    if target is None:
        target = Path(config.export_dir)
        target.mkdir(parents=True, exist_ok=True)
    written = export_invoice(doc, target, fmt=args.format)
    print(written)
    if args.open:
        open_file(written)
    return 0


def _cmd_summary(args: argparse.Namespace, repo: Repository) -> int:
    s = repo.dashboard_summary()
    print(f"Clients:      {s.client_count}")
    print(f"Projects:     {s.project_count}")
    print(f"Invoices:     {s.invoice_count}")
    print(f"Revenue:      {fmt_money(s.paid_revenue)}")
    print(f"Outstanding:  {fmt_money(s.outstanding_amount)}")
    upcoming = repo.upcoming_payments(args.today or date.today())
    if upcoming:
        print("Open invoices:")
        for p in upcoming:
            late = f" ({p.days_overdue} days overdue)" if p.days_overdue else ""
            print(f"- {p.invoice_number} {p.client_name or '-'} {fmt_money(p.total)} due {fmt_date(p.due_date)}{late}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.log_level)

    db = Database(config.database_url)
    try:
        db.create_all()
        if args.command == "init-db":
            print(f"Database ready: {config.database_url}")
            return 0

        repo = _repo(db, config, args.owner)
        if args.owner and args.owner != config.last_owner:
            config.last_owner = args.owner
            save_config(config, args.config)

        if args.command == "seed-demo":
            print("Demo data created" if seed_demo_data(repo) else "Owner already has data; nothing seeded")
            return 0
        if args.command == "export":
            return _cmd_export(args, repo, config)
        if args.command == "summary":
            return _cmd_summary(args, repo)
        if args.command == "next-number":
            print(peek_next_invoice_number(repo, config.invoice_prefix))
            return 0
        return 2
    except (NotFoundError, MissingEntityError, ExportError, ValueError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        db.dispose()


if __name__ == "__main__":
    sys.exit(main())
