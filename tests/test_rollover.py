"""
Tests for the month-rollover archiver.
"""

import pytest

from moneypath.archive import (
    MonthRolloverArchiver,
    RolloverAction,
    RolloverState,
    build_history_entry,
    detect_state,
)
from moneypath.models.ledger import FinanceState, SharedExpense, Transaction


@pytest.fixture
def january():
    return FinanceState(
        current_month="2024-01",
        transactions=[
            Transaction(id=1, amount=120, description="Dinner", category="Outside", date="1/3/2024"),
            Transaction(id=2, amount=30, description="Gadget", category="Useless", date="1/9/2024"),
        ],
        categories=["Udhari", "Outside", "Useless"],
        roommates=["You", "Ravi"],
        shared_expenses=[
            SharedExpense(id=3, amount=400, description="Groceries", paid_by="You", date="1/5/2024"),
        ],
    )


class TestDetectState:
    """Tests for the current/archiving decision."""

    def test_same_month_is_current(self, january):
        """Test a matching month needs no rollover."""
        assert detect_state(january, "2024-01") == RolloverState.CURRENT

    def test_other_month_is_archiving(self, january):
        """Test any other month triggers a rollover, even an earlier one."""
        assert detect_state(january, "2024-02") == RolloverState.ARCHIVING
        assert detect_state(january, "2023-12") == RolloverState.ARCHIVING


class TestMonthRolloverArchiver:
    """Tests for MonthRolloverArchiver.check."""

    def test_same_month_changes_nothing(self, january):
        """Test the state is returned as-is within the month."""
        result = MonthRolloverArchiver().check(january, "2024-01")
        assert result.action == RolloverAction.NONE
        assert result.changed is False
        assert result.state is january
        assert result.entry is None

    def test_archives_finished_month(self, january):
        """Test January is archived when February starts."""
        result = MonthRolloverArchiver().check(january, "2024-02")

        assert result.action == RolloverAction.ARCHIVED
        assert result.previous_month == "2024-01"
        assert result.current_month == "2024-02"

        state = result.state
        assert state.current_month == "2024-02"
        assert state.transactions == []
        assert state.shared_expenses == []
        assert state.categories == january.categories
        assert state.roommates == january.roommates

        assert len(state.history) == 1
        entry = state.history[0]
        assert entry == result.entry
        assert entry.month == "2024-01"
        assert entry.personal_total == 150
        assert entry.category_totals == {"Outside": 120, "Useless": 30}
        assert entry.total_shared == 400
        assert [(s.name, s.paid, s.balance) for s in entry.settlements] == [
            ("You", 400, 200),
            ("Ravi", 0, -200),
        ]
        assert entry.transactions == january.transactions
        assert entry.shared_expenses == january.shared_expenses

    def test_input_state_untouched(self, january):
        """Test the given state is not edited in place."""
        before = january.model_copy(deep=True)
        MonthRolloverArchiver().check(january, "2024-02")
        assert january == before

    def test_empty_month_only_advances(self):
        """Test an idle month is skipped without a history entry."""
        state = FinanceState(current_month="2024-01", roommates=["You"])
        result = MonthRolloverArchiver().check(state, "2024-03")
        assert result.action == RolloverAction.ADVANCED
        assert result.changed is True
        assert result.entry is None
        assert result.state.current_month == "2024-03"
        assert result.state.history == []

    def test_history_appends_in_order(self, january):
        """Test successive rollovers append oldest first."""
        archiver = MonthRolloverArchiver()
        february = archiver.check(january, "2024-02").state
        february = february.model_copy(update={"transactions": [
            Transaction(id=9, amount=5, description="Tea", category="Outside", date="2/2/2024"),
        ]})
        march = archiver.check(february, "2024-03").state
        assert [h.month for h in march.history] == ["2024-01", "2024-02"]

    def test_build_history_entry_without_roommates(self):
        """Test a month with no roommates archives with no settlements."""
        state = FinanceState(
            current_month="2024-01",
            shared_expenses=[SharedExpense(id=1, amount=50, description="x", paid_by="Gone", date="d")],
        )
        entry = build_history_entry(state)
        assert entry.total_shared == 50
        assert entry.settlements == []
