from __future__ import annotations

from datetime import date, timedelta
import logging

from zzpadmin.core.records import CompanySettings
from zzpadmin.data.repo import Repository

logger = logging.getLogger(__name__)


def seed_demo_data(repo: Repository, today: date | None = None) -> bool:
	"""
	Fill an empty owner account with a demo company, clients, projects and invoices.

	Returns False (and changes nothing) when the owner already has clients.
	"""
	if repo.list_clients():
		logger.info("Owner %s already has data; skipping demo seed", repo.owner_id)
		return False
	today = today or date.today()

	repo.save_company_settings(CompanySettings(
		company_name="Yohannes Hoveniersbedrijf B.V.",
		address="Hoofdstraat 123\n1234 AB Amsterdam\nNetherlands",
		kvk_number="76543210",
		btw_number="NL123456789B01",
		iban="NL91ABNA0417164300",
		phone="+31 20 123 4567",
		email="info@yohanneshoveniers.nl",
		vat_default=21,
		payment_terms="Betaling binnen 14 dagen na factuurdatum. Vermeld het factuurnummer bij de betaling.",
	))

	gemeente = repo.create_client(
		"Gemeente Amsterdam",
		address="Amstel 1\n1011 PN Amsterdam\nNetherlands",
		kvk_number="34366966",
		btw_number="NL002564440B01",
		phone="+31 20 624 1111",
		email="info@amsterdam.nl",
	)
	parkbeheer = repo.create_client(
		"Parkbeheer Utrecht",
		address="Stadsplateau 1\n3521 AZ Utrecht",
		email="parken@utrecht.nl",
	)
	vondelpark = repo.create_project("P2024-001", gemeente.id, title="Onderhoud Vondelpark")  # type: ignore[arg-type]
	wilhelmina = repo.create_project("P2024-002", parkbeheer.id, title="Beplanting Wilhelminapark")  # type: ignore[arg-type]

	paid = repo.save_invoice(
		"F0001",
		today - timedelta(days=45),
		gemeente.id,  # type: ignore[arg-type]
		items=[{"description": "Snoeiwerkzaamheden", "quantity": 80, "unit_price": 43.75, "project_id": vondelpark.id}],
	)
	repo.mark_paid(paid.id)  # type: ignore[arg-type]
	repo.save_invoice(
		"F0002",
		today - timedelta(days=20),
		parkbeheer.id,  # type: ignore[arg-type]
		items=[
			{"description": "Ontwerp beplantingsplan", "quantity": 1, "unit_price": 1250, "project_id": wilhelmina.id},
			{"description": "Aanleg borders", "quantity": 1, "unit_price": 3500, "project_id": wilhelmina.id},
			{"description": "Vaste planten", "quantity": 50, "unit_price": 50},
		],
	)
	repo.save_invoice(
		"F0003",
		today - timedelta(days=3),
		gemeente.id,  # type: ignore[arg-type]
		items=[{"description": "Bladruimen", "quantity": 12.5, "unit_price": 45}],
		notes="Najaarsonderhoud",
	)
	logger.info("Seeded demo data for owner %s", repo.owner_id)
	return True
