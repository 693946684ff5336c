"""Tests for spending summaries."""

from datetime import datetime
from decimal import Decimal

from groupsplit.models import Deduction, Expense
from groupsplit.summary import (
    expense_tax,
    expense_total_cost,
    monthly_summaries,
    person_paid_totals,
)


def make_expense(
    id: str, amount: str, date: datetime, category: str, paid_by: str = "A", tax=None
) -> Expense:
    deductions = []
    if tax:
        deductions = [
            Deduction(amount=Decimal("10"), excluded_participants=["B"]),
            Deduction(
                description="Tax", amount=Decimal(tax), excluded_participants=["B"]
            ),
        ]
    return Expense(
        id=id,
        description=f"Expense {id}",
        amount=Decimal(amount),
        date=date,
        category=category,
        paid_by=paid_by,
        participants=["A", "B"],
        deductions=deductions,
    )


class TestExpenseTotals:
    """Tests for per-expense totals."""

    def test_total_cost_adds_every_deduction(self):
        """Deductions, tax included, are charged on top of the base amount."""
        expense = make_expense("e1", "100", datetime(2025, 1, 3), "Food", tax="1.50")

        assert expense_total_cost(expense) == Decimal("111.50")
        assert expense_tax(expense) == Decimal("1.50")

    def test_no_deductions(self):
        expense = make_expense("e1", "42", datetime(2025, 1, 3), "Food")

        assert expense_total_cost(expense) == Decimal("42")
        assert expense_tax(expense) == Decimal("0")


class TestMonthlySummaries:
    """Tests for monthly_summaries."""

    def test_groups_by_month_sorted(self):
        expenses = [
            make_expense("e1", "30", datetime(2025, 2, 10), "Rent"),
            make_expense("e2", "100", datetime(2025, 1, 3), "Food", tax="1.50"),
            make_expense("e3", "50", datetime(2025, 1, 20), "Rent"),
            make_expense("e4", "5", datetime(2025, 1, 21), "Food"),
        ]

        summaries = monthly_summaries(expenses)

        assert [s.month for s in summaries] == ["2025-01", "2025-02"]

        january = summaries[0]
        assert january.expense_count == 3
        assert january.base_amount == Decimal("155")
        assert january.tax_amount == Decimal("1.50")
        assert january.total_amount == Decimal("166.50")
        assert [c.category for c in january.categories] == ["Food", "Rent"]
        assert january.categories[0].total == Decimal("116.50")
        assert january.categories[0].base == Decimal("105")

    def test_empty(self):
        assert monthly_summaries([]) == []


class TestPersonPaidTotals:
    """Tests for person_paid_totals."""

    def test_breakdown_per_payer(self):
        """Each payer gets base, tax and total, in order of first appearance."""
        expenses = [
            make_expense("e1", "30", datetime(2025, 2, 10), "Rent", paid_by="B"),
            make_expense("e2", "100", datetime(2025, 1, 3), "Food", tax="1.50"),
            make_expense("e3", "20", datetime(2025, 1, 4), "Food", paid_by="B", tax="2"),
        ]

        totals = person_paid_totals(expenses)

        assert [(p.person_id, p.base, p.tax, p.total) for p in totals] == [
            ("B", Decimal("50"), Decimal("2"), Decimal("62")),
            ("A", Decimal("100"), Decimal("1.50"), Decimal("111.50")),
        ]

    def test_empty(self):
        assert person_paid_totals([]) == []
