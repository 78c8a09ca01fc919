"""
Core Data Models for MoneyPath

These models define the schemas of everything that is persisted.
They are designed to:
1. Serialize to exactly the document layout the app has always stored
   (camelCase keys such as ``currentMonth`` and ``paidBy``)
2. Load documents written by older clients without complaint
3. Stay immutable once recorded

DESIGN DECISION: Stored records are lenient. Amount and description checks
live in the command validator, not here, so a document that an older client
wrote with a zero amount or blank description still loads instead of being
discarded as corrupt.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


MONTH_PATTERN = r"^\d{4}-\d{2}$"


# =============================================================================
# ENUMS
# =============================================================================

class SettlementStatus(str, Enum):
    """Where a roommate stands against the shared pool."""
    GETS_BACK = "gets_back"  # paid more than their share
    OWES = "owes"            # paid less than their share
    SETTLED = "settled"


# =============================================================================
# RECORDS
# =============================================================================

class LedgerRecord(BaseModel):
    """Base for immutable records stored inside the state document."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Transaction(LedgerRecord):
    """
    A personal expense.

    ``id`` is the creation timestamp in milliseconds; ``date`` is the
    creation date already formatted for display.
    """

    id: int = Field(..., description="Creation timestamp (ms), unique in the list")
    amount: float = Field(..., description="Amount in the ledger currency")
    description: str
    category: str
    date: str = Field(..., description="Display-formatted creation date")


class SharedExpense(LedgerRecord):
    """An expense paid by one roommate on behalf of everyone."""

    id: int
    amount: float
    description: str
    paid_by: str = Field(..., description="Roommate who paid")
    date: str


class Settlement(LedgerRecord):
    """A roommate's position for one month of shared expenses."""

    name: str
    paid: float = 0.0
    balance: float = Field(
        default=0.0,
        description="paid minus per-person share; positive means owed money back"
    )

    @property
    def status(self) -> SettlementStatus:
        if self.balance > 0:
            return SettlementStatus.GETS_BACK
        if self.balance < 0:
            return SettlementStatus.OWES
        return SettlementStatus.SETTLED


class HistoryEntry(LedgerRecord):
    """
    Frozen snapshot of a finished month.

    Created exactly once when the month rolls over. Carries both the
    computed summaries and verbatim copies of the raw records so an
    archived month can be drilled into later.
    """

    month: str = Field(..., pattern=MONTH_PATTERN, description="YYYY-MM")
    personal_total: float = 0.0
    category_totals: dict[str, float] = Field(default_factory=dict)
    total_shared: float = 0.0
    settlements: list[Settlement] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    shared_expenses: list[SharedExpense] = Field(default_factory=list)


# =============================================================================
# STATE DOCUMENT
# =============================================================================

class FinanceState(BaseModel):
    """
    The whole application state, as persisted.

    One instance is owned by the store and passed by reference; commands
    never edit it in place but return an updated copy.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    current_month: str = Field(
        ...,
        pattern=MONTH_PATTERN,
        description="Month whose transactions are still live (YYYY-MM)"
    )
    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    roommates: list[str] = Field(default_factory=list)
    shared_expenses: list[SharedExpense] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "FinanceState":
        """Build a state from a parsed (camelCase) JSON document."""
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Convert to the JSON-compatible document layout."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @property
    def is_month_empty(self) -> bool:
        """True when the live month has nothing worth archiving."""
        return not self.transactions and not self.shared_expenses

    def find_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def find_shared_expense(self, expense_id: int) -> Optional[SharedExpense]:
        return next((e for e in self.shared_expenses if e.id == expense_id), None)
