"""Service layer that keeps a ledger and its balances in step.

The service owns an in-memory roster and expense list. Every change replaces
records wholesale and triggers a full recomputation of balances; listeners are
told about changes through an injected notifier rather than a shared
connection object.
"""

import logging
from typing import Literal, Protocol

from .config import Settings
from .engine import calculate_balances
from .exceptions import DuplicateExpenseError, ExpenseError, ExpenseNotFoundError
from .models import (
    Expense,
    Ledger,
    LedgerEvent,
    MonthlySummary,
    Person,
    PersonBalance,
    Split,
)
from .splitter import compute_expense_splits
from .summary import monthly_summaries
from .validation import validate_expense

logger = logging.getLogger(__name__)


class ChangeNotifier(Protocol):
    """Anything that can publish ledger change events."""

    def publish(self, event: LedgerEvent) -> None: ...


class LedgerService:
    """Service for recording expenses and reporting who owes whom."""

    def __init__(
        self,
        settings: Settings,
        ledger: Ledger | None = None,
        notifier: ChangeNotifier | None = None,
    ):
        """Initialize the service with an optional starting ledger."""
        self.settings = settings
        self.notifier = notifier
        self._people: dict[str, Person] = {}
        self._expenses: list[Expense] = []
        self._balances: list[PersonBalance] = []

        if ledger is not None:
            for person in ledger.people:
                self.add_person(person)
            self._balances = self._compute(ledger.expenses)
            self._expenses = list(ledger.expenses)

    @property
    def people(self) -> list[Person]:
        return list(self._people.values())

    @property
    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    @property
    def balances(self) -> list[PersonBalance]:
        return list(self._balances)

    def add_person(self, person: Person) -> None:
        """Add or replace a roster entry."""
        self._people[person.id] = person

    def person_name(self, person_id: str) -> str:
        """Display name for an id, falling back to the id itself."""
        person = self._people.get(person_id)
        return person.name if person else person_id

    def add_expense(self, expense: Expense) -> list[PersonBalance]:
        """
        Record a new expense and recompute balances.

        Raises:
            DuplicateExpenseError: If an expense with the same id exists
            InvalidExpenseError: If the expense cannot be split
        """
        if self._find_index(expense.id) is not None:
            raise DuplicateExpenseError(expense.id)

        validate_expense(expense)
        self._warn_unknown_people(expense)
        return self._commit([*self._expenses, expense], "created", expense.id)

    def update_expense(self, expense: Expense) -> list[PersonBalance]:
        """
        Replace the expense with the same id and recompute balances.

        Raises:
            ExpenseNotFoundError: If no expense has that id
            InvalidExpenseError: If the new record cannot be split
        """
        index = self._find_index(expense.id)
        if index is None:
            raise ExpenseNotFoundError(expense.id)

        validate_expense(expense)
        self._warn_unknown_people(expense)
        expenses = self.expenses
        expenses[index] = expense
        return self._commit(expenses, "updated", expense.id)

    def delete_expense(self, expense_id: str) -> list[PersonBalance]:
        """
        Remove an expense and recompute balances.

        Raises:
            ExpenseNotFoundError: If no expense has that id
        """
        index = self._find_index(expense_id)
        if index is None:
            raise ExpenseNotFoundError(expense_id)

        expenses = self.expenses
        del expenses[index]
        return self._commit(expenses, "deleted", expense_id)

    def get_expense(self, expense_id: str) -> Expense:
        index = self._find_index(expense_id)
        if index is None:
            raise ExpenseNotFoundError(expense_id)
        return self._expenses[index]

    def splits_for(self, expense_id: str) -> list[Split]:
        """Per-participant shares of one expense."""
        return compute_expense_splits(
            self.get_expense(expense_id),
            tax_pairing=self.settings.tax_pairing,
            over_deduction=self.settings.over_deduction,
        )

    def balances_for(self, person_id: str) -> PersonBalance | None:
        """The balance record of one person, or None if they are settled."""
        for balance in self._balances:
            if balance.person_id == person_id:
                return balance
        return None

    def monthly_summaries(self) -> list[MonthlySummary]:
        return monthly_summaries(self._expenses)

    def invalid_expenses(self) -> list[tuple[Expense, ExpenseError]]:
        """
        Find every expense the engine would refuse under current settings.

        Returns:
            List of (expense, error) pairs, in entry order
        """
        problems = []
        for expense in self._expenses:
            try:
                compute_expense_splits(
                    expense,
                    tax_pairing=self.settings.tax_pairing,
                    over_deduction=self.settings.over_deduction,
                )
            except ExpenseError as e:
                problems.append((expense, e))
        return problems

    def _find_index(self, expense_id: str) -> int | None:
        for i, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return i
        return None

    def _warn_unknown_people(self, expense: Expense) -> None:
        if not self._people:
            return
        unknown = [p for p in expense.participants if p not in self._people]
        if unknown:
            logger.warning(f"Expense {expense.id} references unknown people: {unknown}")

    def _compute(self, expenses: list[Expense]) -> list[PersonBalance]:
        return calculate_balances(
            expenses,
            tax_pairing=self.settings.tax_pairing,
            over_deduction=self.settings.over_deduction,
            skip_invalid=self.settings.skip_invalid_expenses,
        )

    def _commit(
        self,
        expenses: list[Expense],
        action: Literal["created", "updated", "deleted"],
        expense_id: str,
    ) -> list[PersonBalance]:
        # Compute first so a failing batch leaves the ledger untouched
        balances = self._compute(expenses)
        self._expenses = expenses
        self._balances = balances

        logger.info(f"Expense {expense_id} {action}; {len(balances)} open balances")

        if self.notifier is not None:
            self.notifier.publish(
                LedgerEvent(action=action, expense_id=expense_id, balances=balances)
            )
        return self.balances
