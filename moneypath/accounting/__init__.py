"""Accounting engine package."""

from moneypath.accounting.engine import (
    MonthSummary,
    amount_to_settle,
    category_totals,
    expenses_paid_by,
    per_person_share,
    personal_total,
    settlements,
    summarize_history_entry,
    summarize_month,
    total_shared,
    transactions_for_category,
)
from moneypath.accounting.months import display_date, format_month, month_key, utc_now

__all__ = [
    "MonthSummary",
    "amount_to_settle",
    "category_totals",
    "display_date",
    "expenses_paid_by",
    "format_month",
    "month_key",
    "per_person_share",
    "personal_total",
    "settlements",
    "summarize_history_entry",
    "summarize_month",
    "total_shared",
    "transactions_for_category",
    "utc_now",
]
