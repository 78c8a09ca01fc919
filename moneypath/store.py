"""
Finance Store

Owns the single FinanceState of a running app and is the only place it
changes. Every accepted change is persisted in full, synchronously,
before the call returns.

DESIGN DECISION: Persistence problems never reach the user.
- A missing document means a fresh ledger
- A document from before month archiving existed is migrated in place
- A corrupt or unreadable document is logged, copied aside and replaced
  by a fresh ledger
- A failed write is logged; the in-memory state stays correct and only
  durability is lost for that write

Validation rejections are not errors either: the command is declined,
the state is untouched and nothing is written.
"""

import json
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import ValidationError

from moneypath.accounting import month_key, utc_now
from moneypath.archive import RolloverAction
from moneypath.audit import AuditLogger
from moneypath.commands import apply_command
from moneypath.config import LedgerSettings, get_settings
from moneypath.models.commands import (
    AddRoommate,
    AddSharedExpense,
    AddTransaction,
    Command,
    CommandResult,
    DeleteSharedExpense,
    DeleteTransaction,
    RunRolloverCheck,
)
from moneypath.models.ledger import FinanceState
from moneypath.services.storage import StateStorageInterface, StorageError


Clock = Callable[[], datetime]


class StateDocumentError(ValueError):
    """Stored document is not a usable state."""
    pass


class FinanceStore:
    """
    The ledger's persistence and mutation surface.

    Usage:
        store = FinanceStore(InMemoryStorage())
        store.load()
        store.add_transaction("250", "Chai", category="Outside")
    """

    def __init__(
        self,
        storage: StateStorageInterface,
        key: Optional[str] = None,
        ledger_settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = utc_now,
    ):
        """
        Args:
            storage: Backend holding the state document
            key: Slot name; defaults to the configured state key
            ledger_settings: Defaults for a fresh ledger
            audit_logger: Where events go; a local-only logger if None
            clock: Returns the current time (injectable for tests)
        """
        settings = get_settings()
        self._storage = storage
        self._key = key or settings.storage.state_key
        self._ledger_settings = ledger_settings or settings.ledger
        self._audit = audit_logger or AuditLogger()
        self._clock = clock
        self._state: Optional[FinanceState] = None
        # Reentrant: execute() saves, and state may load, while holding it
        self._lock = threading.RLock()

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def key(self) -> str:
        return self._key

    @property
    def state(self) -> FinanceState:
        """The live state; loads it on first access."""
        with self._lock:
            if self._state is None:
                self._state = self.load()
            return self._state

    @property
    def backup_key(self) -> str:
        """Slot an unreadable document is copied to before it is replaced."""
        return f"{self._key}.corrupt"

    def initial_state(self) -> FinanceState:
        """A fresh ledger for the current month."""
        return FinanceState(
            current_month=month_key(self._clock()),
            categories=list(self._ledger_settings.default_categories),
            roommates=list(self._ledger_settings.default_roommates),
        )

    def migrate_legacy(self, document: dict[str, Any]) -> FinanceState:
        """
        Upgrade a document written before month archiving existed.

        The four original lists are kept as they are; the month is set to
        the current one and history starts empty.
        """
        fresh = self.initial_state().to_document()

        def kept(field: str) -> Any:
            value = document.get(field)
            return fresh[field] if value is None else value

        migrated = {
            "currentMonth": fresh["currentMonth"],
            "transactions": kept("transactions"),
            "categories": kept("categories"),
            "roommates": kept("roommates"),
            "sharedExpenses": kept("sharedExpenses"),
            "history": [],
        }
        return FinanceState.from_document(migrated)

    def parse_document(self, payload: str) -> tuple[FinanceState, bool]:
        """
        Parse a stored payload.

        Returns:
            (state, was_migrated)

        Raises:
            StateDocumentError: If the payload is not a usable state
        """
        try:
            document = json.loads(payload)
        except json.JSONDecodeError as e:
            raise StateDocumentError(f"Invalid JSON: {e}")

        if not isinstance(document, dict):
            raise StateDocumentError(
                f"Expected a JSON object, got {type(document).__name__}"
            )

        try:
            if "currentMonth" not in document:
                return self.migrate_legacy(document), True
            return FinanceState.from_document(document), False
        except ValidationError as e:
            raise StateDocumentError(f"Document does not match the state layout: {e}")

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def load(self) -> FinanceState:
        """
        Read the persisted state, falling back to a fresh ledger.

        Never raises. The loaded state becomes the store's live state.
        A document that cannot be parsed is copied to ``backup_key`` first,
        so the fresh ledger written afterwards does not destroy it.
        """
        with self._lock:
            try:
                payload = self._storage.read(self._key)
            except StorageError as e:
                self._audit.log_state_load_failed(self._key, str(e))
                payload = None
            else:
                if payload is None:
                    self._audit.log_state_initialized(self._key, month_key(self._clock()))

            state = None
            if payload is not None:
                try:
                    state, migrated = self.parse_document(payload)
                except StateDocumentError as e:
                    self._audit.log_state_load_failed(self._key, str(e))
                    self._back_up_unreadable(payload)
                else:
                    if migrated:
                        self._audit.log_state_migrated(self._key, state.current_month)
                    self._audit.log_state_loaded(
                        self._key,
                        transaction_count=len(state.transactions),
                        history_count=len(state.history),
                    )

            self._state = state or self.initial_state()
            return self._state

    def _back_up_unreadable(self, payload: str) -> None:
        try:
            self._storage.write(self.backup_key, payload)
        except StorageError as e:
            self._audit.log_state_save_failed(self.backup_key, str(e))
            return
        self._audit.log_state_backed_up(self._key, self.backup_key, len(payload.encode("utf-8")))

    def save(self, state: Optional[FinanceState] = None) -> bool:
        """
        Persist the full state (default: the live one).

        Returns True on success. Failures are logged and swallowed.
        """
        with self._lock:
            state = state if state is not None else self.state
            try:
                payload = state.to_json()
                self._storage.write(self._key, payload)
            except (StorageError, ValueError, TypeError) as e:
                self._audit.log_state_save_failed(self._key, str(e))
                return False

            self._audit.log_state_saved(self._key, len(payload.encode("utf-8")))
            return True

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def execute(self, command: Command) -> CommandResult:
        """
        Apply a command to the live state.

        Accepted changes replace the live state and are persisted;
        rejections and no-ops leave everything as it was.

        Commands from concurrent sessions are applied one at a time; the
        read, apply, replace and persist steps run under one lock.
        """
        with self._lock:
            result = apply_command(self.state, command, now=self._clock())

            if not result.accepted:
                self._audit.log_command_rejected(
                    result.command,
                    result.rejection.value if result.rejection else "unknown",
                    result.message,
                )
                return result

            if result.changed:
                self._state = result.state
                self._log_change(result)
                self.save(self._state)

            return result

    def add_transaction(
        self,
        amount: Optional[Union[str, float]],
        description: Optional[str],
        category: Optional[str] = None,
        new_category: Optional[str] = None,
    ) -> CommandResult:
        return self.execute(AddTransaction(
            amount=amount,
            description=description,
            category=category,
            new_category=new_category,
        ))

    def delete_transaction(self, transaction_id: int) -> CommandResult:
        return self.execute(DeleteTransaction(transaction_id=transaction_id))

    def add_shared_expense(
        self,
        amount: Optional[Union[str, float]],
        description: Optional[str],
        paid_by: Optional[str] = None,
    ) -> CommandResult:
        return self.execute(AddSharedExpense(
            amount=amount,
            description=description,
            paid_by=paid_by,
        ))

    def delete_shared_expense(self, expense_id: int) -> CommandResult:
        return self.execute(DeleteSharedExpense(expense_id=expense_id))

    def add_roommate(self, name: Optional[str]) -> CommandResult:
        return self.execute(AddRoommate(name=name))

    def run_rollover_check(self) -> CommandResult:
        return self.execute(RunRolloverCheck())

    def _log_change(self, result: CommandResult) -> None:
        details = result.details

        if result.command == "add_transaction":
            transaction = details["transaction"]
            if details.get("new_category"):
                self._audit.log_category_added(transaction.category)
            self._audit.log_transaction_added(
                transaction.id, transaction.amount, transaction.category
            )
        elif result.command == "delete_transaction":
            self._audit.log_transaction_deleted(details["transaction_id"])
        elif result.command == "add_shared_expense":
            expense = details["expense"]
            self._audit.log_shared_expense_added(expense.id, expense.amount, expense.paid_by)
        elif result.command == "delete_shared_expense":
            self._audit.log_shared_expense_deleted(details["expense_id"])
        elif result.command == "add_roommate":
            self._audit.log_roommate_added(details["name"])
        elif result.command == "run_rollover_check":
            rollover = details["rollover"]
            if rollover.action == RolloverAction.ARCHIVED:
                self._audit.log_month_archived(
                    month=rollover.previous_month,
                    new_month=rollover.current_month,
                    transaction_count=len(rollover.entry.transactions),
                    shared_expense_count=len(rollover.entry.shared_expenses),
                )
            elif rollover.action == RolloverAction.ADVANCED:
                self._audit.log_month_advanced(rollover.previous_month, rollover.current_month)
