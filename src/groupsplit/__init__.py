"""GroupSplit - Split shared expenses and compute who owes whom."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .deductions import make_deduction, pair_tax_deductions, total_deductions
from .engine import calculate_balances
from .loader import load_ledger
from .models import (
    Balance,
    Deduction,
    Expense,
    Ledger,
    OverDeductionPolicy,
    Person,
    PersonBalance,
    Split,
    TaxPairing,
)
from .service import LedgerService
from .splitter import compute_expense_splits
from .summary import expense_total_cost, monthly_summaries

__all__ = [
    "Settings",
    "load_settings",
    "make_deduction",
    "pair_tax_deductions",
    "total_deductions",
    "calculate_balances",
    "load_ledger",
    "Balance",
    "Deduction",
    "Expense",
    "Ledger",
    "OverDeductionPolicy",
    "Person",
    "PersonBalance",
    "Split",
    "TaxPairing",
    "LedgerService",
    "compute_expense_splits",
    "expense_total_cost",
    "monthly_summaries",
]
