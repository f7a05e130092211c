import datetime

import pytest

from core.coercion import (
    CellError,
    coerce_cell,
    coerce_column,
    coerce_widget,
    to_choice,
    to_choices,
    to_date,
    to_number,
)
from core.schema import CellType, ValueType, WidgetKind


class TestToNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [("12", 12), ("12.5", 12.5), ("1,250", 1250), (3, 3), (2.5, 2.5), ("", None), (None, None)],
    )
    def test_accepted(self, raw, expected):
        assert to_number(raw) == expected

    def test_keeps_ints(self):
        assert isinstance(to_number("40"), int)

    @pytest.mark.parametrize("raw", ["abc", "nan", "inf", True, [1]])
    def test_rejected(self, raw):
        with pytest.raises(CellError):
            to_number(raw)


class TestToDate:
    @pytest.mark.parametrize(
        "raw",
        [
            "2024-03-01",
            "2024-03-01T08:30:00",
            "2024-03-01T08:30:00Z",
            datetime.date(2024, 3, 1),
            datetime.datetime(2024, 3, 1, 8, 30),
        ],
    )
    def test_normalized_to_iso(self, raw):
        assert to_date(raw) == "2024-03-01"

    def test_rejected(self):
        with pytest.raises(CellError):
            to_date("01/03/2024 maybe")


class TestChoices:
    def test_text_matches_numeric_option(self):
        assert to_choice("2024", [2024, 2023]) == 2024

    def test_unknown_choice(self):
        with pytest.raises(CellError):
            to_choice("Great", ["Good", "Fair"])

    def test_comma_separated(self):
        assert to_choices("Boac, Gasan", ["Boac", "Gasan", "Mogpog"]) == ["Boac", "Gasan"]

    def test_reports_bad_values(self):
        with pytest.raises(CellError, match="Manila"):
            to_choices(["Boac", "Manila"], ["Boac", "Gasan"])


class TestDispatch:
    def test_widget_blank_is_none(self):
        assert coerce_widget("  ", WidgetKind.TEXT) is None

    def test_widget_select(self):
        assert coerce_widget("Good", WidgetKind.SELECT, ["Good", "Poor"]) == "Good"

    def test_column_text_keeps_lists(self):
        assert coerce_column(["Boac"], ValueType.TEXT) == ["Boac"]

    def test_column_select(self):
        with pytest.raises(CellError):
            coerce_column("Maybe", ValueType.SELECT, ("Yes", "No"))

    def test_cell_number(self):
        with pytest.raises(CellError):
            coerce_cell("abc", CellType.NUMBER)

    def test_cell_string(self):
        assert coerce_cell(42, CellType.STRING) == "42"
