"""
Main Orchestrator for MoneyPath

Ties the components together and defines the session flow:
1. Startup (load → month rollover check → persist), exactly once
2. Derived views the UI reads (summaries, detail lists, history)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The rollover check runs once per session, before anything is shown
- The UI never computes figures itself; it reads them from here
- Every change goes through the store, so every change is persisted
"""

from typing import Optional

from moneypath.accounting import (
    MonthSummary,
    expenses_paid_by,
    format_month,
    summarize_history_entry,
    summarize_month,
    transactions_for_category,
)
from moneypath.archive import RolloverResult
from moneypath.audit import AuditLogger, configure_logging, create_correlation_id
from moneypath.config import Settings, get_settings
from moneypath.models.commands import Command, CommandResult
from moneypath.models.ledger import (
    FinanceState,
    HistoryEntry,
    SharedExpense,
    Transaction,
)
from moneypath.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StateStorageInterface,
)
from moneypath.store import FinanceStore


class FinanceTracker:
    """
    Orchestrates one app session.

    Flow:
    1. start() → load the stored ledger, archive a finished month, persist
    2. UI reads summaries and detail lists
    3. UI sends commands through the store; each is persisted on accept

    Usage:
        tracker = FinanceTracker(FinanceStore(InMemoryStorage()))
        tracker.start()
        tracker.store.add_transaction("120", "Auto", category="Outside")
        tracker.current_summary().personal_total
    """

    def __init__(self, store: FinanceStore):
        self._store = store
        self._rollover: Optional[RolloverResult] = None

    @property
    def store(self) -> FinanceStore:
        return self._store

    @property
    def state(self) -> FinanceState:
        return self._store.state

    @property
    def started(self) -> bool:
        return self._rollover is not None

    @property
    def rollover(self) -> Optional[RolloverResult]:
        """What the startup rollover check did, once started."""
        return self._rollover

    def start(self) -> RolloverResult:
        """
        Load the ledger and run the month rollover check.

        Runs once; later calls return the first result without touching
        the store again.
        """
        if self._rollover is not None:
            return self._rollover

        self._store.load()
        result = self._store.run_rollover_check()
        self._rollover = result.details["rollover"]

        # A fresh or migrated ledger is written out even when the month
        # didn't change
        if not result.changed:
            self._store.save()

        return self._rollover

    def execute(self, command: Command) -> CommandResult:
        return self._store.execute(command)

    # =========================================================================
    # CURRENT MONTH
    # =========================================================================

    def current_month_label(self) -> str:
        return format_month(self.state.current_month)

    def current_summary(self) -> MonthSummary:
        state = self.state
        return summarize_month(state.transactions, state.shared_expenses, state.roommates)

    def category_transactions(self, category: str) -> list[Transaction]:
        """Transactions of one category, newest first."""
        return list(reversed(transactions_for_category(self.state.transactions, category)))

    def roommate_expenses(self, roommate: str) -> list[SharedExpense]:
        """Shared expenses one roommate paid, newest first."""
        return list(reversed(expenses_paid_by(self.state.shared_expenses, roommate)))

    # =========================================================================
    # HISTORY
    # =========================================================================

    def history(self) -> list[HistoryEntry]:
        """Archived months, most recent first."""
        return list(reversed(self.state.history))

    def history_entry(self, month: str) -> Optional[HistoryEntry]:
        return next((h for h in self.state.history if h.month == month), None)

    @staticmethod
    def history_summary(entry: HistoryEntry) -> MonthSummary:
        return summarize_history_entry(entry)

    @staticmethod
    def archived_category_transactions(entry: HistoryEntry, category: str) -> list[Transaction]:
        return transactions_for_category(entry.transactions, category)

    @staticmethod
    def archived_roommate_expenses(entry: HistoryEntry, roommate: str) -> list[SharedExpense]:
        return expenses_paid_by(entry.shared_expenses, roommate)


def create_storage(settings: Optional[Settings] = None) -> StateStorageInterface:
    """Build the configured storage backend."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return InMemoryStorage(max_payload_bytes=storage_settings.max_payload_bytes)
    return JsonFileStorage(
        data_dir=storage_settings.data_dir,
        max_payload_bytes=storage_settings.max_payload_bytes,
        write_retry_attempts=storage_settings.write_retry_attempts,
    )


def create_app_components(
    storage: Optional[StateStorageInterface] = None,
    settings: Optional[Settings] = None,
) -> FinanceTracker:
    """
    Factory function to create all application components.

    Args:
        storage: Backend to use; built from settings if None.
                 Pass an InMemoryStorage for testing.
        settings: Settings to use; the cached global settings if None

    Returns:
        A FinanceTracker that has not been started yet
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging("DEBUG" if app_settings.debug_mode else app_settings.log_level)

    audit_logger = AuditLogger(create_correlation_id())
    store = FinanceStore(
        storage=storage or create_storage(settings),
        key=settings.storage.state_key,
        ledger_settings=settings.ledger,
        audit_logger=audit_logger,
    )
    return FinanceTracker(store)
