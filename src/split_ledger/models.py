"""Pydantic domain models for SplitLedger."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

SplitMethod = Literal["equal", "exact", "percent", "shares"]

# ============================================================================
# Stored records (supplied by the storage layer)
# ============================================================================


class Member(BaseModel):
    """A member of an expense group."""

    id: str
    name: str


class Split(BaseModel):
    """One member's owed share of a single expense."""

    member_id: str
    amount: Decimal = Field(ge=0)


class Expense(BaseModel):
    """An expense paid by one member and split between participants.

    ``amount`` is in the expense's own ``currency``; ``exchange_rate_to_home``
    is the rate captured when the expense was written and is never re-fetched.
    """

    id: str
    payer_id: str
    amount: Decimal = Field(gt=0)
    currency: str | None = None
    exchange_rate_to_home: Decimal | None = None
    description: str | None = None
    splits: list[Split] = Field(default_factory=list)


class SettlementRecord(BaseModel):
    """A real-world payment already made from one member to another."""

    from_member_id: str
    to_member_id: str
    amount: Decimal = Field(gt=0)
    settled_at: datetime | None = None


class Ledger(BaseModel):
    """Everything the engine needs to compute one group's balances."""

    home_currency: str | None = None
    members: list[Member] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    settlements: list[SettlementRecord] = Field(default_factory=list)


# ============================================================================
# Derived values (never persisted by the engine)
# ============================================================================


class SuggestedTransaction(BaseModel):
    """A payment that would move a debtor's balance toward zero."""

    from_member_id: str
    to_member_id: str
    amount: Decimal = Field(gt=0)


class ValidationResult(BaseModel):
    """Outcome of validating split inputs before an expense is saved."""

    is_valid: bool
    error_code: str | None = None
    error: str | None = None


class MemberBalance(BaseModel):
    """A member paired with their net balance in a group."""

    member: Member
    balance: Decimal  # positive = is owed, negative = owes


class GroupBalanceSummary(BaseModel):
    """Per-member balances for a group plus owed/owing totals."""

    members: list[MemberBalance]
    total_owed: Decimal
    total_owing: Decimal
    member_count: int
    expense_count: int = 0

    @property
    def is_settled(self) -> bool:
        """True when nobody owes anybody anything."""
        return self.total_owed == 0 and self.total_owing == 0
