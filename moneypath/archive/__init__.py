"""Month rollover package."""

from moneypath.archive.rollover import (
    MonthRolloverArchiver,
    RolloverAction,
    RolloverResult,
    RolloverState,
    build_history_entry,
    detect_state,
)

__all__ = [
    "MonthRolloverArchiver",
    "RolloverAction",
    "RolloverResult",
    "RolloverState",
    "build_history_entry",
    "detect_state",
]
