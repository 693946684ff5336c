"""Tests for ledger document loading."""

import json
from decimal import Decimal

import pytest

from groupsplit.exceptions import LedgerFileError
from groupsplit.loader import load_ledger

SAMPLE = {
    "people": [
        {"id": "p1", "name": "Alice", "color": "#f44336"},
        {"id": "p2", "name": "Bob", "color": "#2196f3"},
    ],
    "expenses": [
        {
            "id": "x1",
            "description": "Pizza night",
            "amount": 42.5,
            "date": "2024-03-02T19:45:00.000Z",
            "category": "Food & Dining",
            "paidBy": "p1",
            "participants": ["p1", "p2"],
            "deductions": [
                {
                    "id": "d1",
                    "description": "Beer",
                    "amount": 8,
                    "excludedParticipants": ["p2"],
                }
            ],
        },
        {
            "id": "x2",
            "description": "Parking",
            "amount": 6,
            "date": "2024-03-03T08:00:00.000Z",
            "category": "Transportation",
            "paidBy": "p2",
            "participants": ["p1", "p2"],
        },
    ],
}


@pytest.fixture
def ledger_file(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps(SAMPLE))
    return path


class TestLoadLedger:
    """Tests for load_ledger."""

    def test_reads_camel_case_document(self, ledger_file):
        ledger = load_ledger(ledger_file)

        assert [p.name for p in ledger.people] == ["Alice", "Bob"]
        first = ledger.expenses[0]
        assert first.paid_by == "p1"
        assert first.amount == Decimal("42.5")
        assert first.deductions[0].excluded_participants == ["p2"]
        assert first.date.year == 2024

    def test_missing_deductions_default_to_empty(self, ledger_file):
        ledger = load_ledger(ledger_file)

        assert ledger.expenses[1].deductions == []

    def test_null_deductions_default_to_empty(self, tmp_path):
        data = {"expenses": [{**SAMPLE["expenses"][1], "deductions": None}]}
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps(data))

        assert load_ledger(path).expenses[0].deductions == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(LedgerFileError, match="Cannot read"):
            load_ledger(tmp_path / "nope.json")

    def test_malformed_document(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps({"expenses": [{"id": "x1"}]}))

        with pytest.raises(LedgerFileError, match="Invalid ledger"):
            load_ledger(path)

    def test_round_trips_through_aliases(self, ledger_file):
        """Dumping by alias gives back the client's field names."""
        ledger = load_ledger(ledger_file)

        dumped = ledger.expenses[0].model_dump(by_alias=True)

        assert "paidBy" in dumped
        assert "excludedParticipants" in dumped["deductions"][0]
