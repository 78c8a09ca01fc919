"""
Command Input Validation

DESIGN DECISION: Validation happens in two stages, like any form:

STAGE 1 - FIELD VALIDATION:
- Required fields present and non-blank
- Amount is a plain decimal number, finite and positive
- Text can be stored (encodes as UTF-8)
- This catches empty or garbled form input

STAGE 2 - LEDGER VALIDATION:
- Category resolves to a label
- Payer is a known roommate
- Roommate name is not already taken
- This needs the current state

IMPORTANT: Validation NEVER silently fixes issues beyond trimming
whitespace. A command that fails is declined as a whole, and the state
is left exactly as it was.
"""

import math
import re
from typing import Optional, Union

from moneypath.models.commands import (
    AddRoommate,
    AddSharedExpense,
    AddTransaction,
    RejectionReason,
    ValidationIssue,
    ValidationResult,
)
from moneypath.models.ledger import FinanceState


# What a number form field submits: ASCII digits, optional sign, decimal
# point and exponent
AMOUNT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def _clean_text(value: Optional[str]) -> str:
    return (value or "").strip()


def _is_storable(text: str) -> bool:
    """Text the state document can hold (lone surrogates cannot be encoded)."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _text_issue(field: str, text: str) -> Optional[ValidationIssue]:
    if _is_storable(text):
        return None
    return ValidationIssue(
        field=field,
        reason=RejectionReason.INVALID_TEXT,
        message=f"{field.capitalize()} contains characters that cannot be saved",
    )


def parse_amount(raw: Optional[Union[str, float]]) -> tuple[Optional[float], Optional[ValidationIssue]]:
    """
    Parse a form amount.

    Returns: (amount, None) on success, (None, issue) otherwise
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, ValidationIssue(
            field="amount",
            reason=RejectionReason.EMPTY_AMOUNT,
            message="Amount is required",
        )

    not_a_number = ValidationIssue(
        field="amount",
        reason=RejectionReason.INVALID_AMOUNT,
        message="Amount is not a number",
    )

    if isinstance(raw, str):
        raw = raw.strip()
        if not AMOUNT_PATTERN.match(raw):
            return None, not_a_number

    try:
        amount = float(raw)
    except (TypeError, ValueError):
        return None, not_a_number

    if not math.isfinite(amount) or amount <= 0:
        return None, ValidationIssue(
            field="amount",
            reason=RejectionReason.INVALID_AMOUNT,
            message="Amount must be greater than zero",
        )

    return amount, None


class CommandValidator:
    """
    Validates command input through a two-stage pipeline.

    Stage 1: Field validation (no state needed)
    Stage 2: Ledger validation (checks against the current state)
    """

    def _validate_fields(
        self,
        amount: Optional[Union[str, float]],
        description: Optional[str],
    ) -> tuple[dict, list[ValidationIssue]]:
        """
        Stage 1: amount and description.

        Returns: (cleaned_values, list_of_issues)
        """
        issues = []
        cleaned = {}

        parsed, issue = parse_amount(amount)
        if issue:
            issues.append(issue)
        else:
            cleaned["amount"] = parsed

        text = _clean_text(description)
        text_issue = _text_issue("description", text)
        if not text:
            issues.append(ValidationIssue(
                field="description",
                reason=RejectionReason.EMPTY_DESCRIPTION,
                message="Description is required",
            ))
        elif text_issue:
            issues.append(text_issue)
        else:
            cleaned["description"] = text

        return cleaned, issues

    def validate_transaction(self, command: AddTransaction) -> ValidationResult:
        """
        Validate a new personal transaction.

        The typed-in new category wins over the selected one; if neither
        resolves to text the transaction is declined.
        """
        cleaned, issues = self._validate_fields(command.amount, command.description)

        category = _clean_text(command.new_category) or _clean_text(command.category)
        text_issue = _text_issue("category", category)
        if not category:
            issues.append(ValidationIssue(
                field="category",
                reason=RejectionReason.UNRESOLVED_CATEGORY,
                message="Pick a category or type a new one",
            ))
        elif text_issue:
            issues.append(text_issue)
        else:
            cleaned["category"] = category

        return ValidationResult(issues=issues, cleaned=cleaned if not issues else {})

    def validate_shared_expense(
        self,
        command: AddSharedExpense,
        state: FinanceState,
    ) -> ValidationResult:
        """
        Validate a new shared expense.

        An unspecified payer means the first roommate.
        """
        cleaned, issues = self._validate_fields(command.amount, command.description)

        paid_by = _clean_text(command.paid_by)
        if not state.roommates:
            issues.append(ValidationIssue(
                field="paid_by",
                reason=RejectionReason.NO_ROOMMATES,
                message="Add a roommate before logging shared expenses",
            ))
        elif not paid_by:
            cleaned["paid_by"] = state.roommates[0]
        elif paid_by not in state.roommates:
            issues.append(ValidationIssue(
                field="paid_by",
                reason=RejectionReason.UNKNOWN_PAYER,
                message=f"'{paid_by}' is not one of the roommates",
            ))
        else:
            cleaned["paid_by"] = paid_by

        return ValidationResult(issues=issues, cleaned=cleaned if not issues else {})

    def validate_roommate(
        self,
        command: AddRoommate,
        state: FinanceState,
    ) -> ValidationResult:
        """Names are trimmed and compared case-sensitively."""
        name = _clean_text(command.name)
        if not name:
            issue = ValidationIssue(
                field="name",
                reason=RejectionReason.EMPTY_NAME,
                message="Roommate name is required",
            )
            return ValidationResult(issues=[issue])

        issue = _text_issue("name", name)
        if issue:
            return ValidationResult(issues=[issue])

        if name in state.roommates:
            issue = ValidationIssue(
                field="name",
                reason=RejectionReason.DUPLICATE_ROOMMATE,
                message=f"'{name}' is already a roommate",
            )
            return ValidationResult(issues=[issue])

        return ValidationResult(cleaned={"name": name})
