"""
Command Models for MoneyPath

Every change to the ledger is expressed as one of these commands.
The UI fills them from raw form input; the validator checks them;
the command handlers apply them to a state and return a CommandResult.

DESIGN DECISION: Command fields are raw and permissive (amounts may arrive
as the string typed into a form). Nothing is rejected at model construction;
rejection is a normal outcome reported through CommandResult, never an
exception.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from moneypath.models.ledger import FinanceState


class RejectionReason(str, Enum):
    """Why a command was declined."""
    EMPTY_AMOUNT = "empty_amount"
    INVALID_AMOUNT = "invalid_amount"
    EMPTY_DESCRIPTION = "empty_description"
    INVALID_TEXT = "invalid_text"  # not representable as UTF-8
    UNRESOLVED_CATEGORY = "unresolved_category"
    NO_ROOMMATES = "no_roommates"
    UNKNOWN_PAYER = "unknown_payer"
    EMPTY_NAME = "empty_name"
    DUPLICATE_ROOMMATE = "duplicate_roommate"


# =============================================================================
# COMMANDS
# =============================================================================

class AddTransaction(BaseModel):
    """Log a personal expense."""

    amount: Optional[Union[str, float]] = None
    description: Optional[str] = None
    category: Optional[str] = Field(
        default=None,
        description="Category picked from the existing list"
    )
    new_category: Optional[str] = Field(
        default=None,
        description="Free-text category; wins over 'category' when non-empty"
    )


class DeleteTransaction(BaseModel):
    transaction_id: int


class AddSharedExpense(BaseModel):
    """Log an expense one roommate paid for everyone."""

    amount: Optional[Union[str, float]] = None
    description: Optional[str] = None
    paid_by: Optional[str] = Field(
        default=None,
        description="Roommate who paid; defaults to the first roommate"
    )


class DeleteSharedExpense(BaseModel):
    expense_id: int


class AddRoommate(BaseModel):
    name: Optional[str] = None


class RunRolloverCheck(BaseModel):
    """Compare the stored month to the clock and archive if it moved on."""


Command = Union[
    AddTransaction,
    DeleteTransaction,
    AddSharedExpense,
    DeleteSharedExpense,
    AddRoommate,
    RunRolloverCheck,
]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in command input."""

    field: str = Field(..., description="Field with the issue")
    reason: RejectionReason
    message: str = Field(..., description="Human-readable description")


class ValidationResult(BaseModel):
    """
    Outcome of validating one command.

    ``cleaned`` holds the normalized values (parsed amount, trimmed text,
    resolved category or payer) when validation passes.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
    cleaned: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def rejection(self) -> Optional[RejectionReason]:
        """The first reason found, which is the one reported to callers."""
        return self.issues[0].reason if self.issues else None


# =============================================================================
# RESULT
# =============================================================================

class CommandResult(BaseModel):
    """
    Result of applying a command.

    ``accepted`` is False only for validation rejections. An accepted
    command can still leave the state untouched (deleting an id that is
    not there, a rollover check in the current month); ``changed`` tells
    the store whether a persist is needed.
    """

    command: str
    accepted: bool
    changed: bool = False
    state: FinanceState
    rejection: Optional[RejectionReason] = None
    message: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def rejected(
        cls,
        command: str,
        state: FinanceState,
        validation: ValidationResult,
    ) -> "CommandResult":
        return cls(
            command=command,
            accepted=False,
            state=state,
            rejection=validation.rejection,
            message=validation.issues[0].message if validation.issues else None,
        )
