"""Validation of restricted 5-field cron expressions."""

import logging

from chime.cron.fields import parse_expression

logger = logging.getLogger(__name__)


class InvalidCronExpression(ValueError):
    """Raised when a schedule expression is not accepted."""

    def __init__(self, expression: str) -> None:
        super().__init__(f"Invalid cron expression: {expression!r}")
        self.expression = expression


def is_valid(expression: str) -> bool:
    """Check whether an expression matches the supported grammar.

    Never raises: malformed input of any kind yields False.
    """
    if not isinstance(expression, str):
        return False
    valid = parse_expression(expression) is not None
    if not valid:
        logger.debug("cron_expression_rejected", extra={"cron.expression": expression})
    return valid


def validate(expression: str) -> str:
    """Return the stripped expression, raising InvalidCronExpression if invalid."""
    if not is_valid(expression):
        raise InvalidCronExpression(expression)
    return expression.strip()
