"""
Command Handlers

Applies a command to a FinanceState and returns a CommandResult carrying
either the updated state or the reason it was declined.

DESIGN DECISION: Handlers are pure. They never touch storage, never log
and never edit the state they are given; the store decides what to do
with the result. Time is passed in, so every outcome is reproducible.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from moneypath.accounting import display_date, month_key, utc_now
from moneypath.archive import MonthRolloverArchiver
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
from moneypath.models.ledger import FinanceState, SharedExpense, Transaction
from moneypath.validation import CommandValidator


_validator = CommandValidator()
_archiver = MonthRolloverArchiver()


def next_record_id(existing: Iterable[int], now: datetime) -> int:
    """
    Millisecond creation timestamp, bumped past any id already in use.

    Two records added within the same millisecond still get distinct ids.
    """
    candidate = int(now.timestamp() * 1000)
    highest = max(existing, default=None)
    if highest is not None and candidate <= highest:
        candidate = highest + 1
    return candidate


def apply_command(
    state: FinanceState,
    command: Command,
    now: Optional[datetime] = None,
) -> CommandResult:
    """
    Apply ``command`` to ``state``.

    Args:
        state: Current state (left untouched)
        command: One of the command models
        now: Clock reading used for ids, dates and the month check

    Returns:
        CommandResult; ``result.state`` is the state to keep either way
    """
    now = now or utc_now()

    if isinstance(command, AddTransaction):
        return _add_transaction(command, state, now)
    elif isinstance(command, DeleteTransaction):
        return _delete_transaction(command, state, now)
    elif isinstance(command, AddSharedExpense):
        return _add_shared_expense(command, state, now)
    elif isinstance(command, DeleteSharedExpense):
        return _delete_shared_expense(command, state, now)
    elif isinstance(command, AddRoommate):
        return _add_roommate(command, state, now)
    elif isinstance(command, RunRolloverCheck):
        return _run_rollover_check(command, state, now)

    raise TypeError(f"Unsupported command: {type(command).__name__}")


def _add_transaction(command: AddTransaction, state: FinanceState, now: datetime) -> CommandResult:
    validation = _validator.validate_transaction(command)
    if not validation.is_valid:
        return CommandResult.rejected("add_transaction", state, validation)

    values = validation.cleaned
    transaction = Transaction(
        id=next_record_id((t.id for t in state.transactions), now),
        amount=values["amount"],
        description=values["description"],
        category=values["category"],
        date=display_date(now),
    )

    new_category = values["category"] not in state.categories
    categories = [*state.categories, values["category"]] if new_category else state.categories

    return CommandResult(
        command="add_transaction",
        accepted=True,
        changed=True,
        state=state.model_copy(update={
            "transactions": [*state.transactions, transaction],
            "categories": categories,
        }),
        details={"transaction": transaction, "new_category": new_category},
    )


def _delete_transaction(command: DeleteTransaction, state: FinanceState, now: datetime) -> CommandResult:
    if state.find_transaction(command.transaction_id) is None:
        return CommandResult(command="delete_transaction", accepted=True, state=state)

    remaining = [t for t in state.transactions if t.id != command.transaction_id]
    return CommandResult(
        command="delete_transaction",
        accepted=True,
        changed=True,
        state=state.model_copy(update={"transactions": remaining}),
        details={"transaction_id": command.transaction_id},
    )


def _add_shared_expense(command: AddSharedExpense, state: FinanceState, now: datetime) -> CommandResult:
    validation = _validator.validate_shared_expense(command, state)
    if not validation.is_valid:
        return CommandResult.rejected("add_shared_expense", state, validation)

    values = validation.cleaned
    expense = SharedExpense(
        id=next_record_id((e.id for e in state.shared_expenses), now),
        amount=values["amount"],
        description=values["description"],
        paid_by=values["paid_by"],
        date=display_date(now),
    )
    return CommandResult(
        command="add_shared_expense",
        accepted=True,
        changed=True,
        state=state.model_copy(update={"shared_expenses": [*state.shared_expenses, expense]}),
        details={"expense": expense},
    )


def _delete_shared_expense(command: DeleteSharedExpense, state: FinanceState, now: datetime) -> CommandResult:
    if state.find_shared_expense(command.expense_id) is None:
        return CommandResult(command="delete_shared_expense", accepted=True, state=state)

    remaining = [e for e in state.shared_expenses if e.id != command.expense_id]
    return CommandResult(
        command="delete_shared_expense",
        accepted=True,
        changed=True,
        state=state.model_copy(update={"shared_expenses": remaining}),
        details={"expense_id": command.expense_id},
    )


def _add_roommate(command: AddRoommate, state: FinanceState, now: datetime) -> CommandResult:
    validation = _validator.validate_roommate(command, state)
    if not validation.is_valid:
        return CommandResult.rejected("add_roommate", state, validation)

    name = validation.cleaned["name"]
    return CommandResult(
        command="add_roommate",
        accepted=True,
        changed=True,
        state=state.model_copy(update={"roommates": [*state.roommates, name]}),
        details={"name": name},
    )


def _run_rollover_check(command: RunRolloverCheck, state: FinanceState, now: datetime) -> CommandResult:
    rollover = _archiver.check(state, month_key(now))
    return CommandResult(
        command="run_rollover_check",
        accepted=True,
        changed=rollover.changed,
        state=rollover.state,
        details={"rollover": rollover},
    )
