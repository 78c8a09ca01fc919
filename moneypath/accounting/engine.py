"""
Accounting Engine

DESIGN DECISION: Every computation here is a pure function of the records
it is given. The same functions summarize the live month and any archived
month, so the two can never disagree.

GUARANTEES:
- Empty transaction/expense lists give zero totals
- An empty roommate list gives a zero share and no settlements,
  never a division by zero
- Nothing is rounded; amounts are plain floats and display code rounds
"""

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field

from moneypath.models.ledger import (
    HistoryEntry,
    Settlement,
    SharedExpense,
    Transaction,
)


# =============================================================================
# PERSONAL
# =============================================================================

def personal_total(transactions: Iterable[Transaction]) -> float:
    """Sum of all transaction amounts."""
    return sum((t.amount for t in transactions), 0.0)


def category_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    """
    Total per category, keyed in order of first appearance.

    Categories without transactions are not keys.
    """
    totals: dict[str, float] = {}
    for t in transactions:
        totals[t.category] = totals.get(t.category, 0.0) + t.amount
    return totals


def transactions_for_category(
    transactions: Iterable[Transaction],
    category: str,
) -> list[Transaction]:
    return [t for t in transactions if t.category == category]


# =============================================================================
# SHARED
# =============================================================================

def total_shared(shared_expenses: Iterable[SharedExpense]) -> float:
    """Sum of all shared expense amounts."""
    return sum((e.amount for e in shared_expenses), 0.0)


def per_person_share(total: float, roommate_count: int) -> float:
    """Even split of ``total``; 0 when there is nobody to split between."""
    if roommate_count > 0:
        return total / roommate_count
    return 0.0


def expenses_paid_by(
    shared_expenses: Iterable[SharedExpense],
    roommate: str,
) -> list[SharedExpense]:
    return [e for e in shared_expenses if e.paid_by == roommate]


def settlements(
    roommates: Sequence[str],
    shared_expenses: Sequence[SharedExpense],
    share: float,
) -> list[Settlement]:
    """
    Each roommate's position against the shared pool.

    ``paid`` is what they paid; ``balance`` is paid minus ``share``.
    A positive balance means they get money back, negative means they owe.
    """
    result = []
    for roommate in roommates:
        paid = total_shared(expenses_paid_by(shared_expenses, roommate))
        result.append(Settlement(name=roommate, paid=paid, balance=paid - share))
    return result


def amount_to_settle(balance: float, roommate_count: int) -> float:
    """
    What the app shows a roommate with a negative balance as
    "needs to spend ... to settle".

    NOTE: this is ``abs(balance) * roommate_count``, scaled by the number
    of roommates rather than divided. It does not match the usual "amount
    still owed" and needs product clarification; it is kept as-is so the
    figure users already see does not change.
    """
    if balance < 0:
        return abs(balance) * roommate_count
    return 0.0


# =============================================================================
# MONTH SUMMARY
# =============================================================================

class MonthSummary(BaseModel):
    """Derived figures for one month. Never persisted as-is."""

    personal_total: float = 0.0
    category_totals: dict[str, float] = Field(default_factory=dict)
    total_shared: float = 0.0
    per_person_share: float = 0.0
    roommate_count: int = 0
    settlements: list[Settlement] = Field(default_factory=list)

    def amount_to_settle(self, settlement: Settlement) -> float:
        return amount_to_settle(settlement.balance, self.roommate_count)


def summarize_month(
    transactions: Sequence[Transaction],
    shared_expenses: Sequence[SharedExpense],
    roommates: Sequence[str],
) -> MonthSummary:
    """Compute every summary figure for one month of records."""
    shared = total_shared(shared_expenses)
    share = per_person_share(shared, len(roommates))
    return MonthSummary(
        personal_total=personal_total(transactions),
        category_totals=category_totals(transactions),
        total_shared=shared,
        per_person_share=share,
        roommate_count=len(roommates),
        settlements=settlements(roommates, shared_expenses, share),
    )


def summarize_history_entry(entry: HistoryEntry) -> MonthSummary:
    """
    Rebuild a MonthSummary from an archived month.

    Uses the figures frozen into the entry, not a recomputation, so the
    archive shows exactly what was true when the month closed.
    """
    roommate_count = len(entry.settlements)
    return MonthSummary(
        personal_total=entry.personal_total,
        category_totals=dict(entry.category_totals),
        total_shared=entry.total_shared,
        per_person_share=per_person_share(entry.total_shared, roommate_count),
        roommate_count=roommate_count,
        settlements=list(entry.settlements),
    )
