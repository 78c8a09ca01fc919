"""
Data Models Package

This package contains all Pydantic models used in MoneyPath.
All data flowing through the system must conform to these schemas.
"""

from moneypath.models.ledger import (
    MONTH_PATTERN,
    FinanceState,
    HistoryEntry,
    Settlement,
    SettlementStatus,
    SharedExpense,
    Transaction,
)
from moneypath.models.commands import (
    AddRoommate,
    AddSharedExpense,
    AddTransaction,
    Command,
    CommandResult,
    DeleteSharedExpense,
    DeleteTransaction,
    RejectionReason,
    RunRolloverCheck,
    ValidationIssue,
    ValidationResult,
)
from moneypath.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "MONTH_PATTERN",
    "FinanceState",
    "HistoryEntry",
    "Settlement",
    "SettlementStatus",
    "SharedExpense",
    "Transaction",
    # Commands
    "AddRoommate",
    "AddSharedExpense",
    "AddTransaction",
    "Command",
    "CommandResult",
    "DeleteSharedExpense",
    "DeleteTransaction",
    "RejectionReason",
    "RunRolloverCheck",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
