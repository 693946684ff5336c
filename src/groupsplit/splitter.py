"""Per-expense share computation in integer cents."""

import logging
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .deductions import CENT, pair_tax_deductions
from .exceptions import OverDeductionError
from .models import Expense, OverDeductionPolicy, Split, TaxPairing
from .validation import validate_expense

logger = logging.getLogger(__name__)


def to_cents(amount: Decimal) -> int:
    """
    Convert a Decimal amount to integer cents.
    Uses ROUND_HALF_UP for consistency.
    """
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-place Decimal."""
    return (Decimal(cents) / 100).quantize(CENT)


def allocate_cents(total_cents: int, recipients: Sequence[str]) -> dict[str, int]:
    """
    Split ``total_cents`` evenly across ``recipients`` without losing a cent.

    Every recipient gets the floor share; the leftover cents (largest
    remainder, all remainders being equal) go one each to the first
    recipients in order. Works for negative totals as well.

    Example:
        allocate_cents(100, ["a", "b", "c"]) == {"a": 34, "b": 33, "c": 33}
    """
    if not recipients:
        raise ValueError("Cannot allocate an amount across zero recipients")

    share, remainder = divmod(total_cents, len(recipients))
    allocation = {
        recipient: share + (1 if i < remainder else 0)
        for i, recipient in enumerate(recipients)
    }

    assert sum(allocation.values()) == total_cents, "Allocation lost cents"
    return allocation


def split_expense_cents(
    expense: Expense,
    tax_pairing: TaxPairing = TaxPairing.FIRST_MATCH,
    over_deduction: OverDeductionPolicy = OverDeductionPolicy.PROPAGATE,
) -> dict[str, int]:
    """
    Compute every participant's share of one expense, in cents.

    Steps:
    1. Pair tax deductions with their principal deductions
    2. Subtract the effective deduction amounts from the base amount
    3. Split the remainder evenly across all participants (payer included)
    4. Split each effective deduction amount across the participants it
       applies to; a deduction that excludes everyone is dropped

    Args:
        expense: The expense to split
        tax_pairing: Tax pairing strategy
        over_deduction: Whether a negative remainder is allowed

    Returns:
        Mapping of participant id to share in cents, in participant order

    Raises:
        InvalidExpenseError: If the expense fails validation
        OverDeductionError: If deductions exceed the base amount and the
            policy is REJECT
    """
    validate_expense(expense)

    pairs = pair_tax_deductions(expense.deductions, tax_pairing)
    deduction_cents = [to_cents(pair.effective_amount) for pair in pairs]

    amount_to_split = to_cents(expense.amount) - sum(deduction_cents)
    if amount_to_split < 0:
        if OverDeductionPolicy(over_deduction) is OverDeductionPolicy.REJECT:
            raise OverDeductionError(
                expense.id,
                f"Expense {expense.id}: deductions of "
                f"{from_cents(sum(deduction_cents))} exceed the amount {expense.amount}",
            )
        logger.warning(
            f"Expense {expense.id}: deductions exceed the amount, "
            f"splitting {from_cents(amount_to_split)}"
        )

    shares = allocate_cents(amount_to_split, expense.participants)

    for pair, cents in zip(pairs, deduction_cents):
        excluded = pair.deduction.excluded_key
        included = [p for p in expense.participants if p not in excluded]

        if not included:
            logger.debug(
                f"Expense {expense.id}: deduction {pair.deduction.id} excludes "
                f"every participant; dropped"
            )
            continue

        for participant_id, extra in allocate_cents(cents, included).items():
            shares[participant_id] += extra

    return shares


def compute_expense_splits(
    expense: Expense,
    tax_pairing: TaxPairing = TaxPairing.FIRST_MATCH,
    over_deduction: OverDeductionPolicy = OverDeductionPolicy.PROPAGATE,
) -> list[Split]:
    """Compute every participant's share of one expense (payer included)."""
    shares = split_expense_cents(expense, tax_pairing, over_deduction)
    return [
        Split(participant_id=participant_id, amount=from_cents(cents))
        for participant_id, cents in shares.items()
    ]
