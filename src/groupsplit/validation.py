"""Boundary checks run before an expense is split."""

import logging

from .exceptions import InvalidExpenseError
from .models import Expense

logger = logging.getLogger(__name__)


def validate_expense(expense: Expense) -> None:
    """
    Check that an expense can be split without producing undefined shares.

    Raises:
        InvalidExpenseError: If participants are empty or repeated, the payer
            is not a participant, the amount is not positive, or a deduction
            amount is negative
    """
    if not expense.participants:
        raise InvalidExpenseError(
            expense.id, f"Expense {expense.id} has no participants"
        )

    if len(set(expense.participants)) != len(expense.participants):
        raise InvalidExpenseError(
            expense.id, f"Expense {expense.id} lists a participant more than once"
        )

    if expense.paid_by not in expense.participants:
        raise InvalidExpenseError(
            expense.id,
            f"Expense {expense.id}: payer {expense.paid_by} is not a participant",
        )

    if expense.amount <= 0:
        raise InvalidExpenseError(
            expense.id,
            f"Expense {expense.id} has a non-positive amount: {expense.amount}",
        )

    participants = set(expense.participants)
    for deduction in expense.deductions:
        if deduction.amount < 0:
            raise InvalidExpenseError(
                expense.id,
                f"Expense {expense.id}: deduction {deduction.id} has a negative "
                f"amount: {deduction.amount}",
            )

        # Unknown ids simply never match a participant
        unknown = set(deduction.excluded_participants) - participants
        if unknown:
            logger.debug(
                f"Expense {expense.id}: deduction {deduction.id} excludes "
                f"non-participants {sorted(unknown)}"
            )
