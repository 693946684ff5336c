"""Pydantic domain models for GroupSplit."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Deductions carrying this description are surcharges on a sibling deduction
TAX_DESCRIPTION = "Tax"


def new_id() -> str:
    """Generate a random record id."""
    return str(uuid4())


class LedgerModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Policies
# ============================================================================


class TaxPairing(str, Enum):
    """How tax deductions are matched to principal deductions."""

    FIRST_MATCH = "first_match"  # every principal uses the first equal-set tax
    EXCLUSIVE = "exclusive"  # each tax deduction is used at most once


class OverDeductionPolicy(str, Enum):
    """What to do when deductions exceed an expense's base amount."""

    PROPAGATE = "propagate"
    REJECT = "reject"


# ============================================================================
# Input Models
# ============================================================================


class Person(LedgerModel):
    """A member of the group."""

    id: str
    name: str
    color: str | None = None


class Deduction(LedgerModel):
    """An itemized amount charged only to participants not excluded from it."""

    id: str = Field(default_factory=new_id)
    description: str = "Deduction"
    amount: Decimal
    excluded_participants: list[str] = Field(default_factory=list)

    @property
    def is_tax(self) -> bool:
        return self.description == TAX_DESCRIPTION

    @property
    def excluded_key(self) -> frozenset[str]:
        """Canonical, order-independent form of the excluded set."""
        return frozenset(self.excluded_participants)


class Expense(LedgerModel):
    """A group expense.

    ``amount`` is the base amount. Deduction amounts are charged on top of it:
    they are removed from the even split and re-added only to the participants
    each deduction applies to.
    """

    id: str = Field(default_factory=new_id)
    description: str
    amount: Decimal
    date: datetime
    category: str = "Other"
    paid_by: str
    participants: list[str]
    deductions: list[Deduction] = Field(default_factory=list)

    @field_validator("deductions", mode="before")
    @classmethod
    def _missing_deductions_are_empty(cls, value):
        return [] if value is None else value


# ============================================================================
# Engine Output Models
# ============================================================================


class PairedDeduction(BaseModel):
    """A principal deduction together with the tax deduction layered onto it."""

    deduction: Deduction
    tax: Deduction | None = None

    @property
    def effective_amount(self) -> Decimal:
        return self.deduction.amount + (self.tax.amount if self.tax else Decimal("0"))


class Split(LedgerModel):
    """One participant's full share of one expense."""

    participant_id: str
    amount: Decimal


class Balance(LedgerModel):
    """Net amount between the owning person and ``person_id``.

    Positive: ``person_id`` owes the owner. Negative: the owner owes ``person_id``.
    """

    person_id: str
    amount: Decimal


class PersonBalance(LedgerModel):
    """All non-zero pairwise balances of one person."""

    person_id: str
    balances: list[Balance]
    total_balance: Decimal  # positive = others owe this person

    def owed_by(self) -> list[Balance]:
        """Counterparties who owe this person."""
        return [b for b in self.balances if b.amount > 0]

    def owes_to(self) -> list[Balance]:
        """Counterparties this person owes."""
        return [b for b in self.balances if b.amount < 0]


# ============================================================================
# Summary Models
# ============================================================================


class CategoryTotal(LedgerModel):
    """Spending in one category."""

    category: str
    base: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class PaidTotal(LedgerModel):
    """Everything one person has paid out."""

    person_id: str
    base: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class MonthlySummary(LedgerModel):
    """Spending totals for one calendar month."""

    month: str  # YYYY-MM
    expense_count: int = 0
    base_amount: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    categories: list[CategoryTotal] = Field(default_factory=list)


# ============================================================================
# Ledger Models
# ============================================================================


class Ledger(LedgerModel):
    """A roster of people and their shared expenses."""

    people: list[Person] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)


class LedgerEvent(LedgerModel):
    """Change notification published after the expense list changes."""

    action: Literal["created", "updated", "deleted"]
    expense_id: str
    balances: list[PersonBalance]
    occurred_at: datetime = Field(default_factory=datetime.now)
