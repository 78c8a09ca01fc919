"""
Audit Models for MoneyPath

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every change to the ledger
2. Debugging information when loading or saving goes wrong
3. A record of month rollovers

DESIGN DECISION: Audit events describe what happened; they never carry
the state itself. Amounts and ids go into ``details``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_INITIALIZED = "state_initialized"
    STATE_MIGRATED = "state_migrated"
    STATE_LOAD_FAILED = "state_load_failed"
    STATE_BACKED_UP = "state_backed_up"
    STATE_SAVED = "state_saved"
    STATE_SAVE_FAILED = "state_save_failed"

    # Ledger changes
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    SHARED_EXPENSE_ADDED = "shared_expense_added"
    SHARED_EXPENSE_DELETED = "shared_expense_deleted"
    ROOMMATE_ADDED = "roommate_added"
    CATEGORY_ADDED = "category_added"
    COMMAND_REJECTED = "command_rejected"

    # Month rollover
    MONTH_ARCHIVED = "month_archived"
    MONTH_ADVANCED = "month_advanced"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'state', 'month')"
    )
    entity_id: Optional[str] = None

    # Ties together the events of one app session
    correlation_id: Optional[UUID] = None

    description: str
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.state_loaded("financeData", 3, 1)
        event = AuditEventBuilder.month_archived("2024-01", "2024-02", ...)
    """

    @staticmethod
    def state_loaded(
        key: str,
        transaction_count: int,
        history_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="state",
            entity_id=key,
            correlation_id=correlation_id,
            description=f"State loaded from '{key}'",
            details={
                "transaction_count": transaction_count,
                "history_count": history_count,
            },
        )

    @staticmethod
    def state_initialized(
        key: str,
        month: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_INITIALIZED,
            entity_type="state",
            entity_id=key,
            correlation_id=correlation_id,
            description=f"No saved state under '{key}', starting fresh for {month}",
            details={"month": month},
        )

    @staticmethod
    def state_migrated(
        key: str,
        month: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_MIGRATED,
            entity_type="state",
            entity_id=key,
            correlation_id=correlation_id,
            description="Old data format detected, migrated to the current layout",
            details={"month": month},
        )

    @staticmethod
    def state_backed_up(
        key: str,
        backup_key: str,
        size_bytes: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_BACKED_UP,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            entity_id=key,
            correlation_id=correlation_id,
            description=f"Unreadable state copied to '{backup_key}' before starting fresh",
            details={"backup_key": backup_key, "size_bytes": size_bytes},
        )

    @staticmethod
    def state_load_failed(
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            entity_id=key,
            correlation_id=correlation_id,
            description="Saved state could not be read, starting fresh",
            error_message=error_message,
        )

    @staticmethod
    def state_saved(
        key: str,
        size_bytes: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            entity_id=key,
            correlation_id=correlation_id,
            description=f"State saved to '{key}'",
            details={"size_bytes": size_bytes},
        )

    @staticmethod
    def state_save_failed(
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            entity_id=key,
            correlation_id=correlation_id,
            description="State could not be saved; changes are kept in memory only",
            error_message=error_message,
        )

    @staticmethod
    def transaction_added(
        transaction_id: int,
        amount: float,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=str(transaction_id),
            correlation_id=correlation_id,
            description=f"Transaction added: {category} - {amount:.2f}",
            details={"amount": amount, "category": category},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=str(transaction_id),
            correlation_id=correlation_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def shared_expense_added(
        expense_id: int,
        amount: float,
        paid_by: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHARED_EXPENSE_ADDED,
            entity_type="shared_expense",
            entity_id=str(expense_id),
            correlation_id=correlation_id,
            description=f"Shared expense added: {paid_by} paid {amount:.2f}",
            details={"amount": amount, "paid_by": paid_by},
            is_user_action=True,
        )

    @staticmethod
    def shared_expense_deleted(
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHARED_EXPENSE_DELETED,
            entity_type="shared_expense",
            entity_id=str(expense_id),
            correlation_id=correlation_id,
            description="Shared expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def roommate_added(
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROOMMATE_ADDED,
            entity_type="roommate",
            entity_id=name,
            correlation_id=correlation_id,
            description=f"Roommate added: {name}",
            is_user_action=True,
        )

    @staticmethod
    def category_added(
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category,
            correlation_id=correlation_id,
            description=f"New category: {category}",
            is_user_action=True,
        )

    @staticmethod
    def command_rejected(
        command: str,
        reason: str,
        message: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_REJECTED,
            entity_type="command",
            entity_id=command,
            correlation_id=correlation_id,
            description=f"{command} declined: {reason}",
            details={"reason": reason, "message": message},
            is_user_action=True,
        )

    @staticmethod
    def month_archived(
        month: str,
        new_month: str,
        transaction_count: int,
        shared_expense_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_ARCHIVED,
            entity_type="month",
            entity_id=month,
            correlation_id=correlation_id,
            description=f"New month detected, archived {month}",
            details={
                "new_month": new_month,
                "transaction_count": transaction_count,
                "shared_expense_count": shared_expense_count,
            },
        )

    @staticmethod
    def month_advanced(
        month: str,
        new_month: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_ADVANCED,
            entity_type="month",
            entity_id=month,
            correlation_id=correlation_id,
            description=f"Nothing to archive for {month}, moved on to {new_month}",
            details={"new_month": new_month},
        )
