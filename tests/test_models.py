"""
Tests for MoneyPath models

Test strategy:
1. Unit tests for individual components (models, engine, validator)
2. Integration tests for the store and session flow (in-memory storage)
3. No real home directory or wall clock in tests
"""

import json

import pytest
from pydantic import ValidationError

from moneypath.models.ledger import (
    FinanceState,
    HistoryEntry,
    Settlement,
    SettlementStatus,
    SharedExpense,
    Transaction,
)
from moneypath.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from moneypath.models.commands import (
    CommandResult,
    RejectionReason,
    ValidationIssue,
    ValidationResult,
)


class TestLedgerModels:
    """Tests for the persisted ledger models."""

    def test_transaction_dumps_original_keys(self):
        """Test Transaction serializes to the stored key names."""
        tx = Transaction(id=1, amount=12.5, description="Chai", category="Outside", date="1/15/2024")
        assert tx.model_dump(by_alias=True) == {
            "id": 1,
            "amount": 12.5,
            "description": "Chai",
            "category": "Outside",
            "date": "1/15/2024",
        }

    def test_shared_expense_uses_camel_case_payer(self):
        """Test paid_by is stored as paidBy and accepted either way."""
        by_alias = SharedExpense.model_validate(
            {"id": 1, "amount": 300, "description": "Milk", "paidBy": "Ravi", "date": "1/2/2024"}
        )
        by_name = SharedExpense(id=1, amount=300, description="Milk", paid_by="Ravi", date="1/2/2024")
        assert by_alias == by_name
        assert "paidBy" in by_name.model_dump(by_alias=True)

    def test_records_are_immutable(self):
        """Test recorded transactions cannot be edited."""
        tx = Transaction(id=1, amount=10, description="x", category="Useless", date="1/1/2024")
        with pytest.raises(ValidationError):
            tx.amount = 20

    def test_stored_records_are_lenient(self):
        """Test a zero amount and blank description from an old client still load."""
        tx = Transaction(id=1, amount=0, description="", category="Udhari", date="1/1/2024")
        assert tx.amount == 0

    def test_settlement_status(self):
        """Test settlement status follows the sign of the balance."""
        assert Settlement(name="A", paid=100, balance=50).status == SettlementStatus.GETS_BACK
        assert Settlement(name="B", paid=0, balance=-50).status == SettlementStatus.OWES
        assert Settlement(name="C", paid=50, balance=0).status == SettlementStatus.SETTLED

    def test_history_entry_rejects_bad_month(self):
        """Test history months must be YYYY-MM."""
        with pytest.raises(ValidationError):
            HistoryEntry(month="January 2024")

    def test_history_entry_defaults_raw_lists(self):
        """Test an entry without raw snapshots still loads."""
        entry = HistoryEntry.model_validate({
            "month": "2024-01",
            "personalTotal": 10,
            "categoryTotals": {"Outside": 10},
            "totalShared": 0,
            "settlements": [],
        })
        assert entry.transactions == []
        assert entry.shared_expenses == []


class TestFinanceState:
    """Tests for the state document."""

    def test_document_layout(self):
        """Test the document has exactly the stored top-level keys."""
        state = FinanceState(current_month="2024-01", categories=["Udhari"], roommates=["You"])
        assert set(state.to_document()) == {
            "currentMonth",
            "transactions",
            "categories",
            "roommates",
            "sharedExpenses",
            "history",
        }

    def test_json_round_trip(self):
        """Test to_json and from_document are lossless."""
        state = FinanceState(
            current_month="2024-02",
            transactions=[Transaction(id=5, amount=1.1, description="a", category="X", date="2/1/2024")],
            categories=["X"],
            roommates=["You", "Ravi"],
            shared_expenses=[SharedExpense(id=6, amount=2.2, description="b", paid_by="Ravi", date="2/1/2024")],
            history=[HistoryEntry(
                month="2024-01",
                personal_total=3,
                category_totals={"X": 3},
                total_shared=4,
                settlements=[Settlement(name="You", paid=0, balance=-2)],
            )],
        )
        reloaded = FinanceState.from_document(json.loads(state.to_json()))
        assert reloaded == state
        assert reloaded.to_document() == state.to_document()

    def test_current_month_required(self):
        """Test a document without a valid month is rejected."""
        with pytest.raises(ValidationError):
            FinanceState.from_document({"currentMonth": "2024/01"})

    def test_find_helpers(self):
        """Test lookups by id return None when absent."""
        state = FinanceState(
            current_month="2024-01",
            transactions=[Transaction(id=1, amount=1, description="a", category="X", date="d")],
        )
        assert state.find_transaction(1).description == "a"
        assert state.find_transaction(2) is None
        assert state.find_shared_expense(1) is None

    def test_is_month_empty(self):
        """Test an untouched month counts as empty."""
        assert FinanceState(current_month="2024-01").is_month_empty


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            description="Loaded",
        )
        assert event.event_type == AuditEventType.STATE_LOADED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added(42, 99.5, "Outside")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "42"
        assert log_dict["details"]["category"] == "Outside"
        assert log_dict["is_user_action"] is True

    def test_save_failure_is_an_error(self):
        """Test AuditEventBuilder.state_save_failed severity."""
        event = AuditEventBuilder.state_save_failed("financeData", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_load_failure_is_a_warning(self):
        """Test AuditEventBuilder.state_load_failed severity."""
        event = AuditEventBuilder.state_load_failed("financeData", "bad json")
        assert event.severity == AuditSeverity.WARNING

    def test_month_archived_details(self):
        """Test AuditEventBuilder.month_archived."""
        event = AuditEventBuilder.month_archived("2024-01", "2024-02", 2, 1)
        assert event.entity_id == "2024-01"
        assert event.details == {
            "new_month": "2024-02",
            "transaction_count": 2,
            "shared_expense_count": 1,
        }


class TestCommandModels:
    """Tests for validation and result models."""

    def test_validation_result_reports_first_reason(self):
        """Test rejection is the first issue's reason."""
        result = ValidationResult(issues=[
            ValidationIssue(field="amount", reason=RejectionReason.EMPTY_AMOUNT, message="a"),
            ValidationIssue(field="description", reason=RejectionReason.EMPTY_DESCRIPTION, message="b"),
        ])
        assert result.is_valid is False
        assert result.rejection == RejectionReason.EMPTY_AMOUNT

    def test_empty_validation_result_is_valid(self):
        """Test no issues means valid."""
        result = ValidationResult()
        assert result.is_valid is True
        assert result.rejection is None

    def test_rejected_result(self):
        """Test CommandResult.rejected keeps the given state."""
        state = FinanceState(current_month="2024-01")
        validation = ValidationResult(issues=[
            ValidationIssue(field="name", reason=RejectionReason.EMPTY_NAME, message="Roommate name is required"),
        ])
        result = CommandResult.rejected("add_roommate", state, validation)
        assert result.accepted is False
        assert result.changed is False
        assert result.state is state
        assert result.rejection == RejectionReason.EMPTY_NAME
        assert result.message == "Roommate name is required"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
