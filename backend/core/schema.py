"""Declarative field and column descriptions for data-entry forms."""

import datetime
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal

import pydantic


RECORD_ID_KEY = "_id"


class SchemaError(ValueError):
    """Raised when a form definition breaks a schema invariant."""


class WidgetKind(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    MULTISELECT = "multiselect"


class ValueType(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"


class CellType(StrEnum):
    """Declared cell types accepted by the data migrator."""

    NUMBER = "number"
    STRING = "string"
    DATE = "date"


class Sector(StrEnum):
    BIODIVERSITY = "biodiversity"
    FORESTRY = "forestry"


class FormEnum(StrEnum):
    BIODIVERSITY_4 = "biodiversity_4"
    BIODIVERSITY_8 = "biodiversity_8"
    BIODIVERSITY_12 = "biodiversity_12"
    BIODIVERSITY_20 = "biodiversity_20"
    FORESTRY_5 = "forestry_5"


@dataclass(frozen=True)
class Option:
    value: Any
    label: str


def options_of(*values: Any) -> tuple[Option, ...]:
    """Build options whose label is the value itself."""
    return tuple(Option(value=v, label=str(v)) for v in values)


@dataclass(frozen=True)
class FieldSchema:
    """One input of an add/edit form."""

    name: str
    label: str
    widget_kind: WidgetKind = WidgetKind.TEXT
    required: bool = False
    initial_value: Any = None
    options: tuple[Option, ...] = ()

    def __post_init__(self) -> None:
        has_options = self.widget_kind in (WidgetKind.SELECT, WidgetKind.MULTISELECT)
        if has_options and not self.options:
            raise SchemaError(f"Field {self.name!r} is a {self.widget_kind} without options")
        if not has_options and self.options:
            raise SchemaError(f"Field {self.name!r} is a {self.widget_kind} with options")

    @property
    def option_values(self) -> list[Any]:
        return [o.value for o in self.options]


@dataclass(frozen=True)
class ColumnSchema:
    """One column of the editable grid."""

    header_name: str
    field: str
    editable: bool = True
    value_type: ValueType = ValueType.TEXT
    values: tuple[Any, ...] = ()  # select editor choices


@dataclass(frozen=True)
class MigratorColumn:
    header_name: str
    field: str
    type: CellType = CellType.STRING


_PYTHON_TYPES: dict[WidgetKind, Any] = {
    WidgetKind.TEXT: str,
    WidgetKind.NUMBER: int | float,
    WidgetKind.DATE: datetime.date,
    WidgetKind.MULTISELECT: list[str],
}

def _cell_type(f: FieldSchema) -> CellType:
    if f.widget_kind == WidgetKind.NUMBER:
        return CellType.NUMBER
    if f.widget_kind == WidgetKind.DATE:
        return CellType.DATE
    if f.options and all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in f.option_values
    ):
        return CellType.NUMBER
    return CellType.STRING


@dataclass(frozen=True)
class FormDefinition:
    """Everything needed to render the grid, drawer, migrator and report of one form."""

    form: FormEnum
    sector: Sector
    title: str
    fields: tuple[FieldSchema, ...]
    columns: tuple[ColumnSchema, ...]
    migrator_columns: tuple[MigratorColumn, ...] = ()
    _model: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise SchemaError(f"Duplicate field names in {self.form}: {', '.join(duplicates)}")

        unknown = [c.field for c in self.columns if c.field not in names]
        if unknown:
            raise SchemaError(f"Columns without a matching field in {self.form}: {', '.join(unknown)}")

    @property
    def cell_columns(self) -> tuple[MigratorColumn, ...]:
        """Migrator columns, derived from the fields when none are declared."""
        if self.migrator_columns:
            return self.migrator_columns
        return tuple(
            MigratorColumn(header_name=f.name, field=f.name, type=_cell_type(f))
            for f in self.fields
            if f.widget_kind != WidgetKind.MULTISELECT
        )

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldSchema | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def record_model(self) -> type[pydantic.BaseModel]:
        """Pydantic model holding exactly this form's fields plus the backend id.

        Undeclared keys are ignored, select fields only accept their option
        values and required fields reject None.
        """
        if "model" not in self._model:
            definitions: dict[str, Any] = {
                "record_id": (str | None, pydantic.Field(default=None, alias=RECORD_ID_KEY)),
            }
            for f in self.fields:
                if f.widget_kind == WidgetKind.SELECT:
                    annotation: Any = Literal[tuple(f.option_values)]
                else:
                    annotation = _PYTHON_TYPES[f.widget_kind]
                if f.required:
                    definitions[f.name] = (annotation, ...)
                else:
                    definitions[f.name] = (annotation | None, None)

            self._model["model"] = pydantic.create_model(
                f"{self.form.value.title().replace('_', '')}Record",
                __config__=pydantic.ConfigDict(extra="ignore", populate_by_name=True),
                **definitions,
            )
        return self._model["model"]
