"""Deduction and tax pairing for a single expense.

A deduction described as "Tax" is never allocated on its own. It is layered
onto the principal deduction whose excluded-participant set is equal to its
own (order-independent), so the pair is charged to the same people.
"""

import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from .models import TAX_DESCRIPTION, Deduction, PairedDeduction, TaxPairing

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def pair_tax_deductions(
    deductions: Sequence[Deduction],
    mode: TaxPairing = TaxPairing.FIRST_MATCH,
) -> list[PairedDeduction]:
    """
    Match every principal deduction with the tax deduction that applies to it.

    Tax deductions are indexed once by their canonical excluded set, then each
    principal deduction looks up its own set.

    With ``TaxPairing.FIRST_MATCH`` every principal takes the first tax
    deduction with an equal set, so two principals sharing one set both carry
    the same tax. With ``TaxPairing.EXCLUSIVE`` a tax deduction is consumed by
    the earliest principal that matches it and is not reused.

    Args:
        deductions: Deductions of one expense, in entry order
        mode: Pairing strategy

    Returns:
        One PairedDeduction per principal deduction, in entry order
    """
    mode = TaxPairing(mode)

    taxes_by_key: dict[frozenset[str], list[Deduction]] = {}
    for deduction in deductions:
        if deduction.is_tax:
            taxes_by_key.setdefault(deduction.excluded_key, []).append(deduction)

    pairs = []
    used_tax_ids = set()
    for deduction in deductions:
        if deduction.is_tax:
            continue

        candidates = taxes_by_key.get(deduction.excluded_key)
        tax = None
        if candidates:
            if mode is TaxPairing.EXCLUSIVE:
                tax = candidates.pop(0)
            else:
                tax = candidates[0]
            used_tax_ids.add(tax.id)

        pairs.append(PairedDeduction(deduction=deduction, tax=tax))

    for deduction in deductions:
        if deduction.is_tax and deduction.id not in used_tax_ids:
            logger.debug(
                f"Tax deduction {deduction.id} matches no principal deduction; ignored"
            )

    return pairs


def total_deductions(
    deductions: Sequence[Deduction],
    mode: TaxPairing = TaxPairing.FIRST_MATCH,
) -> Decimal:
    """Sum the effective (deduction plus paired tax) amount of every principal."""
    return sum(
        (pair.effective_amount for pair in pair_tax_deductions(deductions, mode)),
        Decimal("0"),
    )


def make_deduction(
    amount: Decimal,
    description: str = "Deduction",
    excluded_participants: Iterable[str] = (),
    tax_percent: Decimal | None = None,
) -> list[Deduction]:
    """
    Build a deduction and, when a tax rate is given, its paired tax deduction.

    The tax amount is ``amount * tax_percent / 100`` rounded to the cent, and
    it excludes exactly the same participants so it pairs with the principal.

    Returns:
        ``[deduction]`` or ``[deduction, tax_deduction]``
    """
    excluded = list(excluded_participants)
    deduction = Deduction(
        description=description or "Deduction",
        amount=amount,
        excluded_participants=excluded,
    )

    if tax_percent is None or tax_percent <= 0:
        return [deduction]

    tax_amount = (Decimal(amount) * Decimal(tax_percent) / 100).quantize(
        CENT, rounding=ROUND_HALF_UP
    )
    tax = Deduction(
        description=TAX_DESCRIPTION,
        amount=tax_amount,
        excluded_participants=list(excluded),
    )
    return [deduction, tax]
