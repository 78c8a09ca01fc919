"""
Tests for the pure command handlers.
"""

from datetime import datetime, timezone

import pytest

from moneypath.archive import RolloverAction
from moneypath.commands import apply_command, next_record_id
from moneypath.models.commands import (
    AddRoommate,
    AddSharedExpense,
    AddTransaction,
    DeleteSharedExpense,
    DeleteTransaction,
    RejectionReason,
    RunRolloverCheck,
)
from moneypath.models.ledger import FinanceState, SharedExpense, Transaction


NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)


@pytest.fixture
def state():
    return FinanceState(
        current_month="2024-01",
        categories=["Udhari", "Outside", "Useless"],
        roommates=["You", "Ravi"],
    )


class TestNextRecordId:
    """Tests for record id generation."""

    def test_timestamp_id(self):
        """Test ids are millisecond timestamps."""
        assert next_record_id([], NOW) == NOW_MS

    def test_bumped_past_existing(self):
        """Test a clash within the same millisecond is avoided."""
        assert next_record_id([NOW_MS], NOW) == NOW_MS + 1
        assert next_record_id([NOW_MS + 40], NOW) == NOW_MS + 41

    def test_older_ids_ignored(self):
        """Test older ids don't affect a fresh timestamp."""
        assert next_record_id([1, 2, 3], NOW) == NOW_MS


class TestTransactionCommands:
    """Tests for adding and deleting personal transactions."""

    def test_add_transaction(self, state):
        """Test a valid transaction is appended with id and date."""
        result = apply_command(
            state, AddTransaction(amount="250", description="Chai", category="Outside"), now=NOW,
        )
        assert result.accepted and result.changed
        assert result.rejection is None

        added = result.state.transactions[-1]
        assert added.id == NOW_MS
        assert added.amount == 250
        assert added.description == "Chai"
        assert added.category == "Outside"
        assert added.date == "1/15/2024"
        assert result.state.categories == state.categories
        assert result.details["new_category"] is False

    def test_new_category_appended(self, state):
        """Test a typed-in category joins the category list."""
        result = apply_command(
            state, AddTransaction(amount="80", description="Book", new_category="Study"), now=NOW,
        )
        assert result.state.categories == ["Udhari", "Outside", "Useless", "Study"]
        assert result.details["new_category"] is True

    def test_rejected_transaction_keeps_state(self, state):
        """Test a declined transaction leaves the state as it was."""
        result = apply_command(
            state, AddTransaction(amount="0", description="Free", category="Outside"), now=NOW,
        )
        assert result.accepted is False
        assert result.changed is False
        assert result.rejection == RejectionReason.INVALID_AMOUNT
        assert result.state is state

    def test_input_state_not_mutated(self, state):
        """Test handlers return a new state."""
        apply_command(state, AddTransaction(amount="1", description="x", new_category="New"), now=NOW)
        assert state.transactions == []
        assert "New" not in state.categories

    def test_delete_transaction(self, state):
        """Test deleting removes exactly the matching record."""
        state = state.model_copy(update={"transactions": [
            Transaction(id=1, amount=10, description="a", category="Outside", date="d"),
            Transaction(id=2, amount=20, description="b", category="Outside", date="d"),
        ]})
        result = apply_command(state, DeleteTransaction(transaction_id=1), now=NOW)
        assert result.changed
        assert [t.id for t in result.state.transactions] == [2]

    def test_delete_unknown_transaction(self, state):
        """Test deleting a missing id is accepted but changes nothing."""
        result = apply_command(state, DeleteTransaction(transaction_id=404), now=NOW)
        assert result.accepted is True
        assert result.changed is False
        assert result.state is state


class TestSharedCommands:
    """Tests for shared expenses and roommates."""

    def test_add_shared_expense(self, state):
        """Test a shared expense records its payer."""
        result = apply_command(
            state, AddSharedExpense(amount="600", description="Rent share", paid_by="Ravi"), now=NOW,
        )
        expense = result.state.shared_expenses[-1]
        assert expense.paid_by == "Ravi"
        assert expense.amount == 600
        assert expense.date == "1/15/2024"

    def test_unknown_payer_rejected(self, state):
        """Test a payer who isn't a roommate is declined."""
        result = apply_command(
            state, AddSharedExpense(amount="600", description="Rent", paid_by="Nobody"), now=NOW,
        )
        assert result.rejection == RejectionReason.UNKNOWN_PAYER
        assert result.state.shared_expenses == []

    def test_delete_shared_expense(self, state):
        """Test deleting a shared expense by id."""
        state = state.model_copy(update={"shared_expenses": [
            SharedExpense(id=7, amount=10, description="a", paid_by="You", date="d"),
        ]})
        result = apply_command(state, DeleteSharedExpense(expense_id=7), now=NOW)
        assert result.state.shared_expenses == []

    def test_delete_unknown_shared_expense(self, state):
        """Test deleting a missing shared expense is a no-op."""
        result = apply_command(state, DeleteSharedExpense(expense_id=7), now=NOW)
        assert result.accepted and not result.changed

    def test_add_roommate(self, state):
        """Test a roommate is appended."""
        result = apply_command(state, AddRoommate(name=" Asha "), now=NOW)
        assert result.state.roommates == ["You", "Ravi", "Asha"]

    def test_duplicate_roommate(self, state):
        """Test a duplicate roommate is declined."""
        result = apply_command(state, AddRoommate(name="You"), now=NOW)
        assert result.rejection == RejectionReason.DUPLICATE_ROOMMATE
        assert result.state.roommates == ["You", "Ravi"]


class TestRolloverCommand:
    """Tests for the rollover check as a command."""

    def test_same_month(self, state):
        """Test nothing changes inside the stored month."""
        result = apply_command(state, RunRolloverCheck(), now=NOW)
        assert result.accepted and not result.changed
        assert result.details["rollover"].action == RolloverAction.NONE

    def test_next_month(self, state):
        """Test the month rolls over on the clock's month."""
        state = state.model_copy(update={"transactions": [
            Transaction(id=1, amount=10, description="a", category="Outside", date="1/2/2024"),
        ]})
        february = datetime(2024, 2, 1, 0, 5, tzinfo=timezone.utc)
        result = apply_command(state, RunRolloverCheck(), now=february)
        assert result.changed
        assert result.state.current_month == "2024-02"
        assert result.details["rollover"].action == RolloverAction.ARCHIVED


class TestDispatch:
    """Tests for command dispatch."""

    def test_unknown_command(self, state):
        """Test an unsupported command type is a programming error."""
        with pytest.raises(TypeError):
            apply_command(state, object(), now=NOW)
