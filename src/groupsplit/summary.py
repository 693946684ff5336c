"""Spending totals across expenses."""

from collections.abc import Iterable
from decimal import Decimal

from .models import CategoryTotal, Expense, MonthlySummary, PaidTotal


def expense_tax(expense: Expense) -> Decimal:
    """Sum of the expense's tax deductions."""
    return sum((d.amount for d in expense.deductions if d.is_tax), Decimal("0"))


def expense_total_cost(expense: Expense) -> Decimal:
    """Base amount plus every deduction, tax included."""
    return expense.amount + sum((d.amount for d in expense.deductions), Decimal("0"))


def month_key(expense: Expense) -> str:
    return expense.date.strftime("%Y-%m")


def monthly_summaries(expenses: Iterable[Expense]) -> list[MonthlySummary]:
    """
    Group expenses by calendar month and total them.

    Returns:
        Summaries sorted by month ascending; each summary's categories are
        sorted by total descending
    """
    months: dict[str, MonthlySummary] = {}
    categories: dict[str, dict[str, CategoryTotal]] = {}

    for expense in expenses:
        key = month_key(expense)
        summary = months.setdefault(key, MonthlySummary(month=key))
        tax = expense_tax(expense)
        total = expense_total_cost(expense)

        summary.expense_count += 1
        summary.base_amount += expense.amount
        summary.tax_amount += tax
        summary.total_amount += total

        category = categories.setdefault(key, {}).setdefault(
            expense.category, CategoryTotal(category=expense.category)
        )
        category.base += expense.amount
        category.tax += tax
        category.total += total

    result = []
    for key in sorted(months):
        summary = months[key]
        summary.categories = sorted(
            categories[key].values(), key=lambda c: c.total, reverse=True
        )
        result.append(summary)
    return result


def person_paid_totals(expenses: Iterable[Expense]) -> list[PaidTotal]:
    """Base, tax and total cost paid by each payer, in order of first appearance."""
    totals: dict[str, PaidTotal] = {}
    for expense in expenses:
        paid = totals.setdefault(
            expense.paid_by, PaidTotal(person_id=expense.paid_by)
        )
        paid.base += expense.amount
        paid.tax += expense_tax(expense)
        paid.total += expense_total_cost(expense)
    return list(totals.values())
