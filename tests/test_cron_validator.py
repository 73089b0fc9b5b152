"""Tests for cron expression validation."""

import pytest

from chime.cron import InvalidCronExpression, is_valid, validate
from chime.cron.fields import (
    DAY_OF_WEEK,
    MINUTE,
    FieldKind,
    parse_expression,
    parse_field,
)


class TestIsValid:
    """Tests for is_valid()."""

    @pytest.mark.parametrize(
        "expression",
        [
            "* * * * *",
            "*/5 * * * *",
            "0 8 * * *",
            "59 23 31 12 6",
            "0 0 1 1 0",
            "0,15,30,45 * * * *",
            "0 9 * * 1-5",
            "0 10 * * 0,6",
            "0 */2 * * *",
            "0 0 */31 * *",
            "30 18 1-15 6-8 *",
            "  0 8 * * *  ",
        ],
    )
    def test_accepts_supported_shapes(self, expression):
        assert is_valid(expression) is True

    @pytest.mark.parametrize(
        "expression",
        [
            "99 * * * *",  # minute out of bounds
            "0 24 * * *",  # hour out of bounds
            "0 0 0 * *",  # day-of-month starts at 1
            "0 0 * 13 *",  # month out of bounds
            "0 0 * * 7",  # day-of-week is 0-6
            "0 8 * *",  # too few fields
            "0 8 * * * *",  # too many fields
            "",
            "0  8 * * *",  # double space yields an empty field
            "*/0 * * * *",
            "*/60 * * * *",
            "0 0 * * */7",
            "0 9 * * 5-1",  # descending range
            "0 9 * * 1-3,5",  # list mixed with range
            "0 9 * * 1-3-5",
            "0-30/5 * * * *",  # stepped range
            "a * * * *",
            "0 9 * * MON",
            "0 9 * JAN *",
            "-1 * * * *",
            "0,,15 * * * *",
            "5, * * * *",
            "? * * * *",
            "0\n 8 * * *",  # embedded newline
            "\u0663 * * * *",  # non-ASCII digit
        ],
    )
    def test_rejects_everything_else(self, expression):
        assert is_valid(expression) is False

    def test_list_member_out_of_bounds(self):
        assert is_valid("0,60 * * * *") is False

    def test_non_string_input_is_rejected(self):
        assert is_valid(None) is False  # type: ignore[arg-type]
        assert is_valid(5) is False  # type: ignore[arg-type]


class TestValidate:
    """Tests for validate()."""

    def test_returns_stripped_expression(self):
        assert validate(" 0 8 * * * ") == "0 8 * * *"

    def test_raises_for_invalid(self):
        with pytest.raises(InvalidCronExpression) as exc_info:
            validate("0 8 * *")
        assert exc_info.value.expression == "0 8 * *"
        assert isinstance(exc_info.value, ValueError)


class TestParseField:
    """Tests for field parsing."""

    def test_wildcard(self):
        field = parse_field("*", MINUTE)
        assert field is not None
        assert field.kind is FieldKind.ANY
        assert field.expand() == tuple(range(60))

    def test_step(self):
        field = parse_field("*/20", MINUTE)
        assert field is not None
        assert field.kind is FieldKind.STEP
        assert field.expand() == (0, 20, 40)

    def test_list_expands_sorted_unique(self):
        field = parse_field("5,1,5", DAY_OF_WEEK)
        assert field is not None
        assert field.kind is FieldKind.LIST
        assert field.expand() == (1, 5)

    def test_range(self):
        field = parse_field("1-5", DAY_OF_WEEK)
        assert field is not None
        assert field.values == (1, 5)
        assert field.expand() == (1, 2, 3, 4, 5)

    def test_parse_expression_returns_five_fields(self):
        fields = parse_expression("0 8 * * 1")
        assert fields is not None
        assert len(fields) == 5
        assert fields[4].values == (1,)
