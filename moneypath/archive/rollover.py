"""
Month-Rollover Archiver

Two states:

CURRENT:   the stored month is the actual month. Nothing to do.
ARCHIVING: the stored month is behind. Snapshot it into history (unless it
           is empty), clear the live lists and move on to the actual month.

The check is run once per session, before the UI becomes interactive.
An app left running across a month boundary rolls over at its next start.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from moneypath.accounting import summarize_month
from moneypath.models.ledger import FinanceState, HistoryEntry


class RolloverState(str, Enum):
    CURRENT = "current"
    ARCHIVING = "archiving"


class RolloverAction(str, Enum):
    """What the check ended up doing."""
    NONE = "none"          # already on the actual month
    ADVANCED = "advanced"  # month moved on, nothing to archive
    ARCHIVED = "archived"  # month snapshotted into history


class RolloverResult(BaseModel):
    """Outcome of one rollover check."""

    action: RolloverAction
    state: FinanceState
    previous_month: str
    current_month: str
    entry: Optional[HistoryEntry] = None

    @property
    def changed(self) -> bool:
        return self.action != RolloverAction.NONE


def detect_state(state: FinanceState, actual_month: str) -> RolloverState:
    if state.current_month == actual_month:
        return RolloverState.CURRENT
    return RolloverState.ARCHIVING


def build_history_entry(state: FinanceState) -> HistoryEntry:
    """Snapshot the live month: summaries plus verbatim copies of its records."""
    summary = summarize_month(state.transactions, state.shared_expenses, state.roommates)
    return HistoryEntry(
        month=state.current_month,
        personal_total=summary.personal_total,
        category_totals=summary.category_totals,
        total_shared=summary.total_shared,
        settlements=summary.settlements,
        transactions=list(state.transactions),
        shared_expenses=list(state.shared_expenses),
    )


class MonthRolloverArchiver:
    """
    Archives the live month once the clock has moved past it.

    Pure with respect to its input: ``check`` returns a new state and
    leaves the one it was given untouched.
    """

    def check(self, state: FinanceState, actual_month: str) -> RolloverResult:
        """
        Compare ``state.current_month`` to ``actual_month`` and roll over
        if they differ.

        Args:
            state: The state as loaded
            actual_month: ``YYYY-MM`` for the current clock

        Returns:
            RolloverResult with the (possibly) updated state
        """
        previous = state.current_month

        if detect_state(state, actual_month) == RolloverState.CURRENT:
            return RolloverResult(
                action=RolloverAction.NONE,
                state=state,
                previous_month=previous,
                current_month=actual_month,
            )

        # An idle month leaves no trace in history
        if state.is_month_empty:
            return RolloverResult(
                action=RolloverAction.ADVANCED,
                state=state.model_copy(update={"current_month": actual_month}),
                previous_month=previous,
                current_month=actual_month,
            )

        entry = build_history_entry(state)
        updated = state.model_copy(update={
            "current_month": actual_month,
            "transactions": [],
            "shared_expenses": [],
            "history": [*state.history, entry],
        })
        return RolloverResult(
            action=RolloverAction.ARCHIVED,
            state=updated,
            previous_month=previous,
            current_month=actual_month,
            entry=entry,
        )
