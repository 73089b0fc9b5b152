"""Next-trigger calculation for restricted cron expressions.

Fields are evaluated against the wall clock of the reference instant's
timezone. Resolution follows a fixed precedence:

1. Stepped minute (``*/N``): next multiple of N minutes.
2. Explicit day-of-week: next matching weekday at the hour/minute fields
   (zero for wildcards).
3. Explicit minute and hour: next matching time of day.
4. Wildcard minute and hour: next whole minute.
5. Remaining shapes: resolved on the single explicit field.

Day-of-month and month are accepted by the validator but not applied here.
"""

import math
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from chime.cron.fields import CronField, FieldKind, parse_expression


def next_trigger(expression: str, now: datetime) -> datetime:
    """Get the first instant strictly after ``now`` matching the expression.

    Args:
        expression: A validated expression (see ``chime.cron.validator``).
        now: Reference instant. Aware datetimes are evaluated in their own
            timezone.

    Returns:
        Next fire time with seconds and microseconds zeroed.

    Raises:
        ValueError: If the expression is not valid.
    """
    fields = parse_expression(expression)
    if fields is None:
        raise ValueError(f"Invalid cron expression: {expression!r}")
    minute, hour, _day_of_month, _month, day_of_week = fields

    base = now.replace(second=0, microsecond=0)

    if minute.kind is FieldKind.STEP:
        assert minute.step is not None
        return _next_step(minute.step, now, base)

    if not day_of_week.is_wildcard:
        return _next_weekday(minute, hour, day_of_week, now, base)

    if not minute.is_wildcard and not hour.is_wildcard:
        return _next_time_of_day(minute.expand(), hour.expand(), now, base)

    if minute.is_wildcard and hour.is_wildcard:
        return _advance(base + timedelta(minutes=1), timedelta(minutes=1), now)

    if not minute.is_wildcard:
        return _next_minute_of_hour(minute.expand(), now, base)

    return _next_minute_in_hours(hour.expand(), now, base)


def next_trigger_ms(expression: str, now_ms: int, timezone: str = "UTC") -> int:
    """Epoch-millisecond wrapper around ``next_trigger``."""
    now = datetime.fromtimestamp(now_ms / 1000, ZoneInfo(timezone))
    return to_epoch_ms(next_trigger(expression, now))


def iter_triggers(expression: str, start: datetime) -> Iterator[datetime]:
    """Yield successive trigger times after ``start``."""
    current = start
    while True:
        current = next_trigger(expression, current)
        yield current


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _earliest(candidates: Iterable[datetime], now: datetime) -> datetime | None:
    """Pick the earliest candidate instant strictly after ``now``.

    Candidates are wall-clock times. When a clock change repeats a wall
    time, its second occurrence (``fold=1``) is considered as well.
    Comparison is on absolute instants, since aware datetimes sharing a
    tzinfo compare by wall time alone.
    """
    threshold = now.timestamp()
    found: list[datetime] = []
    for candidate in candidates:
        first = candidate.replace(fold=0)
        moments = [first]
        repeated = candidate.replace(fold=1)
        if repeated.timestamp() > first.timestamp():
            moments.append(repeated)
        found.extend(m for m in moments if m.timestamp() > threshold)
    return min(found, key=datetime.timestamp, default=None)


def _advance(candidate: datetime, delta: timedelta, now: datetime) -> datetime:
    """Step ``candidate`` by ``delta`` until it lands after ``now``.

    Wall-clock order and instant order disagree for up to an hour around a
    clock change, so neighbours within an hour either side of the first hit
    are weighed too.
    """
    while _earliest([candidate], now) is None:
        candidate += delta
    span = math.ceil(timedelta(hours=1) / delta)
    found = _earliest((candidate + delta * k for k in range(-span, span + 1)), now)
    assert found is not None
    return found


def _next_step(step: int, now: datetime, base: datetime) -> datetime:
    slot = math.ceil(now.minute / step) * step
    candidate = base.replace(minute=0) + timedelta(minutes=slot)
    return _advance(candidate, timedelta(minutes=step), now)


def _cron_weekday(moment: datetime) -> int:
    # Python: Monday=0, cron: Sunday=0
    return (moment.weekday() + 1) % 7


def _time_values(field: CronField) -> tuple[int, ...]:
    return (0,) if field.is_wildcard else field.expand()


def _next_weekday(
    minute: CronField,
    hour: CronField,
    day_of_week: CronField,
    now: datetime,
    base: datetime,
) -> datetime:
    midnight = base.replace(hour=0, minute=0)
    weekdays = set(day_of_week.expand())
    candidates = [
        day.replace(hour=h, minute=m)
        for day in (midnight + timedelta(days=offset) for offset in range(8))
        if _cron_weekday(day) in weekdays
        for h in _time_values(hour)
        for m in _time_values(minute)
    ]
    found = _earliest(candidates, now)
    if found is None:
        raise AssertionError(f"no weekday match after {now}")  # pragma: no cover
    return found


def _next_time_of_day(
    minutes: tuple[int, ...], hours: tuple[int, ...], now: datetime, base: datetime
) -> datetime:
    midnight = base.replace(hour=0, minute=0)
    candidates = [
        (midnight + timedelta(days=offset)).replace(hour=h, minute=m)
        for offset in (0, 1)
        for h in hours
        for m in minutes
    ]
    found = _earliest(candidates, now)
    if found is None:
        raise AssertionError(f"no time-of-day match after {now}")  # pragma: no cover
    return found


def _next_minute_of_hour(
    minutes: tuple[int, ...], now: datetime, base: datetime
) -> datetime:
    hour_start = base.replace(minute=0)
    candidates = [
        (hour_start + timedelta(hours=offset)).replace(minute=m)
        for offset in range(3)
        for m in minutes
    ]
    found = _earliest(candidates, now)
    if found is None:
        raise AssertionError(f"no minute match after {now}")  # pragma: no cover
    return found


def _next_minute_in_hours(
    hours: tuple[int, ...], now: datetime, base: datetime
) -> datetime:
    candidates: list[datetime] = []
    next_minute = base + timedelta(minutes=1)
    if next_minute.hour in hours:
        candidates.append(next_minute)
    midnight = base.replace(hour=0, minute=0)
    candidates.extend(
        (midnight + timedelta(days=offset)).replace(hour=h)
        for offset in (0, 1)
        for h in hours
    )
    found = _earliest(candidates, now)
    if found is None:
        raise AssertionError(f"no hour match after {now}")  # pragma: no cover
    return found
