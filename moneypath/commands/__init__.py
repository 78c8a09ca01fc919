"""Command handling package."""

from moneypath.commands.handlers import apply_command, next_record_id

__all__ = ["apply_command", "next_record_id"]
