"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every ledger change
2. Debugging capability for load/save problems
3. A record of month rollovers

The audit logger:
- Is synchronous; the app has a single execution context
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace the events of one session
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from moneypath.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the stdlib root logger to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log. Events carry the
    session's correlation id unless one is given explicitly.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Initialize audit logger.

        Args:
            correlation_id: Id stamped on events that don't bring their own.
        """
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("moneypath.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written. Never raises.
        """
        if event.correlation_id is None:
            event = event.model_copy(update={"correlation_id": self.correlation_id})

        try:
            log_dict = event.to_log_dict()
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            logging.getLogger(__name__).error("audit logging failed: %s", e)
            return False

        return True

    def log_state_loaded(self, key: str, transaction_count: int, history_count: int) -> None:
        self.log(AuditEventBuilder.state_loaded(key, transaction_count, history_count))

    def log_state_initialized(self, key: str, month: str) -> None:
        self.log(AuditEventBuilder.state_initialized(key, month))

    def log_state_migrated(self, key: str, month: str) -> None:
        self.log(AuditEventBuilder.state_migrated(key, month))

    def log_state_load_failed(self, key: str, error_message: str) -> None:
        """Log a read/parse failure of the stored state."""
        self.log(AuditEventBuilder.state_load_failed(key, error_message))

    def log_state_backed_up(self, key: str, backup_key: str, size_bytes: int) -> None:
        self.log(AuditEventBuilder.state_backed_up(key, backup_key, size_bytes))

    def log_state_saved(self, key: str, size_bytes: int) -> None:
        self.log(AuditEventBuilder.state_saved(key, size_bytes))

    def log_state_save_failed(self, key: str, error_message: str) -> None:
        """Log a failed write; the in-memory state is still correct."""
        self.log(AuditEventBuilder.state_save_failed(key, error_message))

    def log_transaction_added(self, transaction_id: int, amount: float, category: str) -> None:
        self.log(AuditEventBuilder.transaction_added(transaction_id, amount, category))

    def log_transaction_deleted(self, transaction_id: int) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def log_shared_expense_added(self, expense_id: int, amount: float, paid_by: str) -> None:
        self.log(AuditEventBuilder.shared_expense_added(expense_id, amount, paid_by))

    def log_shared_expense_deleted(self, expense_id: int) -> None:
        self.log(AuditEventBuilder.shared_expense_deleted(expense_id))

    def log_roommate_added(self, name: str) -> None:
        self.log(AuditEventBuilder.roommate_added(name))

    def log_category_added(self, category: str) -> None:
        self.log(AuditEventBuilder.category_added(category))

    def log_command_rejected(self, command: str, reason: str, message: Optional[str] = None) -> None:
        self.log(AuditEventBuilder.command_rejected(command, reason, message))

    def log_month_archived(
        self,
        month: str,
        new_month: str,
        transaction_count: int,
        shared_expense_count: int,
    ) -> None:
        self.log(AuditEventBuilder.month_archived(
            month=month,
            new_month=new_month,
            transaction_count=transaction_count,
            shared_expense_count=shared_expense_count,
        ))

    def log_month_advanced(self, month: str, new_month: str) -> None:
        self.log(AuditEventBuilder.month_advanced(month, new_month))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One is created per app session and shared by everything it logs.
    """
    return uuid4()
