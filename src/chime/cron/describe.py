"""Human-readable descriptions of cron expressions."""

from chime.cron.fields import CronField, FieldKind, parse_expression

DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

# Literal expressions with fixed phrasing
WELL_KNOWN: dict[str, str] = {
    "* * * * *": "every minute",
    "0 * * * *": "every hour",
    "0 0 * * *": "every day at midnight",
    "0 12 * * *": "every day at noon",
    "0 0 * * 0": "every Sunday at midnight",
}


def format_time(hour: int, minute: int) -> str:
    """Format a 24h hour/minute as ``H:MM AM/PM``."""
    period = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    return f"{hour12}:{minute:02d} {period}"


def describe(expression: str) -> str:
    """Describe an expression in plain English.

    Unrecognized shapes are returned verbatim.
    """
    expression = expression.strip()
    if expression in WELL_KNOWN:
        return WELL_KNOWN[expression]

    fields = parse_expression(expression)
    if fields is None:
        return expression
    minute, hour, day_of_month, month, day_of_week = fields

    if minute.kind is FieldKind.STEP:
        if minute.step == 1:
            return "every minute"
        return f"every {minute.step} minutes"

    if (
        minute.kind is FieldKind.VALUE
        and hour.kind is FieldKind.VALUE
        and day_of_month.is_wildcard
        and month.is_wildcard
    ):
        at = format_time(hour.values[0], minute.values[0])
        if day_of_week.is_wildcard:
            return f"every day at {at}"
        return f"every {_describe_days(day_of_week)} at {at}"

    return expression


def _describe_days(field: CronField) -> str:
    if field.kind is FieldKind.RANGE:
        start, end = field.values
        return f"{DAY_NAMES[start]} to {DAY_NAMES[end]}"
    if field.kind is FieldKind.LIST:
        return " and ".join(DAY_NAMES[day] for day in field.values)
    if field.kind is FieldKind.STEP:
        return " and ".join(DAY_NAMES[day] for day in field.expand())
    return DAY_NAMES[field.values[0]]
