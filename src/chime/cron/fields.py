"""Cron field grammar.

Each of the five fields of an expression is parsed into a ``CronField``.
Only a restricted grammar is accepted:

- ``*``           any value
- ``*/N``         step wildcard, ``0 < N <= max``
- ``N``           single value
- ``A,B,C``       list of single values
- ``A-B``         simple range, ``A <= B``

Named values, list+range mixes and stepped ranges are rejected.
"""

import re
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class FieldSpec:
    """Name and inclusive bounds of a cron field."""

    name: str
    min: int
    max: int


MINUTE = FieldSpec("minute", 0, 59)
HOUR = FieldSpec("hour", 0, 23)
DAY_OF_MONTH = FieldSpec("day_of_month", 1, 31)
MONTH = FieldSpec("month", 1, 12)
DAY_OF_WEEK = FieldSpec("day_of_week", 0, 6)

FIELD_SPECS: tuple[FieldSpec, ...] = (MINUTE, HOUR, DAY_OF_MONTH, MONTH, DAY_OF_WEEK)

_STEP_RE = re.compile(r"\*/(\d+)", re.ASCII)
_VALUE_RE = re.compile(r"\d+", re.ASCII)
_LIST_RE = re.compile(r"\d+(?:,\d+)+", re.ASCII)
_RANGE_RE = re.compile(r"(\d+)-(\d+)", re.ASCII)


class FieldKind(Enum):
    ANY = "any"
    STEP = "step"
    VALUE = "value"
    LIST = "list"
    RANGE = "range"


@dataclass(frozen=True)
class CronField:
    """A parsed cron field.

    ``values`` holds the explicit numbers written in the field: the single
    value, the list members, or the range endpoints. ``step`` is set only
    for step wildcards.
    """

    spec: FieldSpec
    kind: FieldKind
    values: tuple[int, ...] = ()
    step: int | None = None

    @property
    def is_wildcard(self) -> bool:
        return self.kind is FieldKind.ANY

    def expand(self) -> tuple[int, ...]:
        """Expand the field into the sorted set of values it allows."""
        if self.kind is FieldKind.ANY:
            return tuple(range(self.spec.min, self.spec.max + 1))
        if self.kind is FieldKind.STEP:
            assert self.step is not None
            return tuple(range(self.spec.min, self.spec.max + 1, self.step))
        if self.kind is FieldKind.RANGE:
            start, end = self.values
            return tuple(range(start, end + 1))
        return tuple(sorted(set(self.values)))


def parse_field(token: str, spec: FieldSpec) -> CronField | None:
    """Parse a single field token, returning None if it is not accepted."""
    if token == "*":
        return CronField(spec, FieldKind.ANY)

    if match := _STEP_RE.fullmatch(token):
        step = int(match.group(1))
        if 0 < step <= spec.max:
            return CronField(spec, FieldKind.STEP, step=step)
        return None

    if _VALUE_RE.fullmatch(token):
        value = int(token)
        if _in_bounds(value, spec):
            return CronField(spec, FieldKind.VALUE, values=(value,))
        return None

    if _LIST_RE.fullmatch(token):
        values = tuple(int(part) for part in token.split(","))
        if all(_in_bounds(v, spec) for v in values):
            return CronField(spec, FieldKind.LIST, values=values)
        return None

    if match := _RANGE_RE.fullmatch(token):
        start, end = int(match.group(1)), int(match.group(2))
        if _in_bounds(start, spec) and _in_bounds(end, spec) and start <= end:
            return CronField(spec, FieldKind.RANGE, values=(start, end))
        return None

    return None


def split_expression(expression: str) -> list[str]:
    """Split an expression into raw field tokens on single spaces."""
    return expression.strip().split(" ")


def parse_expression(expression: str) -> tuple[CronField, ...] | None:
    """Parse all five fields of an expression, or None if any is invalid."""
    tokens = split_expression(expression)
    if len(tokens) != len(FIELD_SPECS):
        return None

    fields: list[CronField] = []
    for token, spec in zip(tokens, FIELD_SPECS, strict=True):
        parsed = parse_field(token, spec)
        if parsed is None:
            return None
        fields.append(parsed)
    return tuple(fields)


def _in_bounds(value: int, spec: FieldSpec) -> bool:
    return spec.min <= value <= spec.max
