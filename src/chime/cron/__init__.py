"""Restricted cron expressions.

Public API:
- is_valid / validate: Grammar check for 5-field expressions
- next_trigger: Next fire time strictly after a reference instant
- describe: Plain-English rendering of an expression
"""

from chime.cron.calculator import (
    iter_triggers,
    next_trigger,
    next_trigger_ms,
    to_epoch_ms,
)
from chime.cron.describe import describe, format_time
from chime.cron.validator import InvalidCronExpression, is_valid, validate

__all__ = [
    "InvalidCronExpression",
    "describe",
    "format_time",
    "is_valid",
    "iter_triggers",
    "next_trigger",
    "next_trigger_ms",
    "to_epoch_ms",
    "validate",
]
