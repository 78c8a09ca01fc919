"""Input validation package."""

from moneypath.validation.validator import CommandValidator, parse_amount

__all__ = ["CommandValidator", "parse_amount"]
