"""Turn raw cell and input values into the types a form declares."""

import datetime
from collections.abc import Iterable
from typing import Any

from core.schema import CellType, ValueType, WidgetKind


class CellError(ValueError):
    """A value that cannot be read as its declared type."""


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def to_number(value: Any) -> int | float | None:
    """Read a number, keeping integers as ints."""
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise CellError("Expected a number")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise CellError(f"{value!r} is not a number") from None
        if number != number or number in (float("inf"), float("-inf")):
            raise CellError(f"{value!r} is not a number")
        return number
    raise CellError("Expected a number")


def to_date(value: Any) -> str | None:
    """Read a date and return it as an ISO ``YYYY-MM-DD`` string.

    Accepts date and datetime objects as well as ISO date or datetime
    strings (a trailing ``Z`` is allowed).
    """
    if is_blank(value):
        return None
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.date.fromisoformat(text).isoformat()
        except ValueError:
            pass
        try:
            return datetime.datetime.fromisoformat(text).date().isoformat()
        except ValueError:
            raise CellError(f"{value!r} is not a date") from None
    raise CellError("Expected a date")


def to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (dict, list, tuple)):
        raise CellError("Expected text")
    text = str(value)
    return text if text.strip() else None


def _match_choice(value: Any, allowed: list[Any]) -> Any:
    # Query strings and pasted cells arrive as text, so "2024" matches 2024.
    if value in allowed:
        return value
    for choice in allowed:
        if str(choice) == str(value).strip():
            return choice
    raise CellError(f"{value!r} is not one of the allowed values")


def to_choice(value: Any, choices: Iterable[Any]) -> Any:
    if is_blank(value):
        return None
    return _match_choice(value, list(choices))


def to_choices(value: Any, choices: Iterable[Any]) -> list[Any] | None:
    """Read a multi-select value. A comma separated string is split."""
    if is_blank(value):
        return None
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",") if part.strip()]
    if not isinstance(value, (list, tuple)):
        raise CellError("Expected a list of values")
    allowed = list(choices)
    result = []
    bad = []
    for v in value:
        try:
            result.append(_match_choice(v, allowed))
        except CellError:
            bad.append(v)
    if bad:
        raise CellError(f"Not allowed: {', '.join(map(str, bad))}")
    return result


def coerce_widget(value: Any, kind: WidgetKind, options: Iterable[Any] = ()) -> Any:
    if kind == WidgetKind.NUMBER:
        return to_number(value)
    if kind == WidgetKind.DATE:
        return to_date(value)
    if kind == WidgetKind.SELECT:
        return to_choice(value, options)
    if kind == WidgetKind.MULTISELECT:
        return to_choices(value, options)
    return to_text(value)


def coerce_column(value: Any, value_type: ValueType, values: Iterable[Any] = ()) -> Any:
    if value_type == ValueType.NUMBER:
        return to_number(value)
    if value_type == ValueType.DATE:
        return to_date(value)
    if value_type == ValueType.SELECT and values:
        return to_choice(value, values)
    # Text columns may hold lists (multi-select fields shown as text).
    if isinstance(value, list):
        return value
    return to_text(value)


def coerce_cell(value: Any, cell_type: CellType) -> Any:
    if cell_type == CellType.NUMBER:
        return to_number(value)
    if cell_type == CellType.DATE:
        return to_date(value)
    return to_text(value)
