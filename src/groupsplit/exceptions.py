"""Custom exceptions for GroupSplit."""


class GroupSplitError(Exception):
    """Base exception for all GroupSplit errors."""

    pass


class ConfigurationError(GroupSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class LedgerFileError(GroupSplitError):
    """Raised when a ledger document cannot be read or parsed."""

    pass


class ExpenseError(GroupSplitError):
    """Base class for errors tied to a single expense."""

    def __init__(self, expense_id: str, message: str | None = None):
        self.expense_id = expense_id
        super().__init__(message or f"Expense {expense_id} is not valid")


class InvalidExpenseError(ExpenseError):
    """Raised when an expense breaks the structural rules for splitting."""

    pass


class OverDeductionError(ExpenseError):
    """Raised when deductions exceed the base amount and the policy rejects it."""

    pass


class ExpenseNotFoundError(ExpenseError):
    """Raised when an expense id is not present in the ledger."""

    def __init__(self, expense_id: str, message: str | None = None):
        super().__init__(expense_id, message or f"Expense {expense_id} not found")


class DuplicateExpenseError(ExpenseError):
    """Raised when adding an expense whose id already exists."""

    def __init__(self, expense_id: str, message: str | None = None):
        super().__init__(
            expense_id, message or f"Expense {expense_id} already exists in the ledger"
        )
