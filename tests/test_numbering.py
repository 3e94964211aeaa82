from __future__ import annotations

from datetime import date

from zzpadmin.core.numbering import last_sequence, peek_next_invoice_number
from zzpadmin.data.repo import Repository


def test_last_sequence_ignores_other_prefixes() -> None:
    numbers = ["F0001", "F0012", "X0099", "F-7", "Fabc", ""]
    assert last_sequence("F", numbers) == 12
    assert last_sequence("Q", numbers) == 0


def test_peek_next_from_repository(repo: Repository) -> None:
    assert peek_next_invoice_number(repo, "F") == "F0001"
    client = repo.create_client("Klant")
    repo.save_invoice("F0001", date(2024, 1, 1), client.id)
    repo.save_invoice("F0007", date(2024, 1, 2), client.id)
    assert peek_next_invoice_number(repo, "F") == "F0008"
    assert peek_next_invoice_number(repo, "F2024-") == "F2024-0001"
