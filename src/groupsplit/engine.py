"""Balance engine: turns a list of expenses into a pairwise debt ledger."""

import logging
from collections.abc import Iterable

from .exceptions import ExpenseError
from .models import (
    Balance,
    Expense,
    OverDeductionPolicy,
    PersonBalance,
    TaxPairing,
)
from .splitter import from_cents, split_expense_cents

logger = logging.getLogger(__name__)

# debt[a][b] = cents a owes b; always debt[a][b] == -debt[b][a]
DebtMatrix = dict[str, dict[str, int]]


def calculate_balances(
    expenses: Iterable[Expense],
    *,
    tax_pairing: TaxPairing = TaxPairing.FIRST_MATCH,
    over_deduction: OverDeductionPolicy = OverDeductionPolicy.PROPAGATE,
    skip_invalid: bool = False,
) -> list[PersonBalance]:
    """
    Compute net pairwise balances for every person involved in ``expenses``.

    Each participant other than the payer owes the payer their share of the
    expense. Shares are accumulated in integer cents, so the result is exact
    and identical across runs.

    By default the batch is atomic: every expense is split before the ledger
    is built, and the first invalid one raises. With ``skip_invalid`` invalid
    expenses are logged and left out while the others still count.

    Args:
        expenses: Expenses in entry order
        tax_pairing: Tax pairing strategy
        over_deduction: Policy for deductions larger than the base amount
        skip_invalid: Skip invalid expenses instead of failing the batch

    Returns:
        One PersonBalance per person with a non-zero counterparty, in order of
        first appearance. A positive Balance means the counterparty owes the
        owner.

    Raises:
        InvalidExpenseError: If an expense is invalid and skip_invalid is False
        OverDeductionError: If the policy rejects an over-deducted expense and
            skip_invalid is False
    """
    contributions = []
    for expense in expenses:
        try:
            shares = split_expense_cents(expense, tax_pairing, over_deduction)
        except ExpenseError as e:
            if not skip_invalid:
                raise
            logger.warning(f"Skipping expense {expense.id}: {e}")
            continue
        contributions.append((expense.paid_by, shares))

    debt = build_debt_matrix(contributions)
    balances = to_person_balances(debt)

    logger.debug(
        f"Computed balances for {len(balances)} people "
        f"from {len(contributions)} expenses"
    )
    return balances


def build_debt_matrix(contributions: Iterable[tuple[str, dict[str, int]]]) -> DebtMatrix:
    """Accumulate (payer, shares) pairs into a symmetric debt matrix."""
    debt: DebtMatrix = {}
    for payer, shares in contributions:
        for participant_id, cents in shares.items():
            if participant_id == payer:
                continue

            participant_row = debt.setdefault(participant_id, {})
            payer_row = debt.setdefault(payer, {})

            participant_row[payer] = participant_row.get(payer, 0) + cents
            payer_row[participant_id] = payer_row.get(participant_id, 0) - cents

    return debt


def to_person_balances(debt: DebtMatrix) -> list[PersonBalance]:
    """Convert a debt matrix to PersonBalance records, dropping zero entries."""
    result = []
    for person_id, row in debt.items():
        # Flip to the owner's point of view: positive = counterparty owes owner
        owed = {other: -cents for other, cents in row.items() if cents != 0}
        if not owed:
            continue

        result.append(
            PersonBalance(
                person_id=person_id,
                balances=[
                    Balance(person_id=other, amount=from_cents(cents))
                    for other, cents in owed.items()
                ],
                total_balance=from_cents(sum(owed.values())),
            )
        )

    return result
