"""Fields and columns shared by every sector's forms."""

import datetime

from core.schema import ColumnSchema, FieldSchema, Option, ValueType, WidgetKind, options_of


FIRST_CALENDAR_YEAR = 2000
DEFAULT_PROVINCE = "Marinduque"

MUNICIPALITIES = ("Boac", "Buenavista", "Gasan", "Mogpog", "Santa Cruz", "Torrijos")

YES_NO = options_of("Yes", "No")


def year_options(start: int = FIRST_CALENDAR_YEAR, end: int | None = None) -> tuple[Option, ...]:
    """Calendar years from ``start`` to ``end`` (default: this year), newest first."""
    end = end or datetime.date.today().year
    return options_of(*range(end, start - 1, -1))


CALENDAR_YEAR = FieldSchema(
    name="calendar_year",
    label="Calendar Year",
    widget_kind=WidgetKind.SELECT,
    required=True,
    options=year_options(),
)

PROVINCE = FieldSchema(
    name="province",
    label="Province",
    initial_value=DEFAULT_PROVINCE,
)

MUNICIPALITY = FieldSchema(
    name="municipality",
    label="Municipality",
    widget_kind=WidgetKind.SELECT,
    options=options_of(*MUNICIPALITIES),
)

CALENDAR_YEAR_COLUMN = ColumnSchema(header_name="CY", field="calendar_year", value_type=ValueType.NUMBER)
PROVINCE_COLUMN = ColumnSchema(header_name="Province", field="province")
MUNICIPALITY_COLUMN = ColumnSchema(header_name="Municipality", field="municipality")
