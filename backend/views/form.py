"""Generic add/edit form driven by a field schema."""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from core.coercion import CellError, coerce_widget, is_blank
from core.errors import GatewayError
from core.notifications import ActionResult, success
from core.schema import FieldSchema, Option, WidgetKind


logger = logging.getLogger(__name__)

SubmitCallback = Callable[[dict[str, Any]], Awaitable[Any]]

INSERTED_MESSAGE = "Data successfully inserted."


@dataclass
class Widget:
    """Render descriptor for one input of the drawer."""

    name: str
    label: str
    widget: WidgetKind
    required: bool
    value: Any
    options: list[Option] = field(default_factory=list)
    error: str | None = None


class FormView:
    """Drawer form: renders inputs from a field schema and submits one record.

    A rejected submission keeps the drawer open with the typed values so the
    user can retry; a successful one clears and closes it.
    """

    def __init__(self, fields: Iterable[FieldSchema], on_submit: SubmitCallback):
        self.fields = tuple(fields)
        self.on_submit = on_submit
        self.visible = False
        self.values = self._initial_values()
        self.field_errors: list[dict[str, Any]] = []

    def _initial_values(self) -> dict[str, Any]:
        return {f.name: f.initial_value for f in self.fields}

    def open(self) -> None:
        self.visible = True

    def close(self) -> None:
        self.visible = False
        self.values = self._initial_values()
        self.field_errors = []

    def render(self) -> list[Widget]:
        errors = {e.get("field"): e.get("msg") for e in self.field_errors}
        return [
            Widget(
                name=f.name,
                label=f.label,
                widget=f.widget_kind,
                required=f.required,
                value=self.values.get(f.name),
                options=list(f.options),
                error=errors.get(f.name),
            )
            for f in self.fields
        ]

    def build_record(self, values: Mapping[str, Any]) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        """Collect one value per declared field; undeclared keys are dropped.

        Blank or missing inputs fall back to the field's initial value.
        """
        record: dict[str, Any] = {}
        errors: list[dict[str, Any]] = []
        for f in self.fields:
            raw = values.get(f.name)
            if is_blank(raw):
                raw = f.initial_value
            try:
                value = coerce_widget(raw, f.widget_kind, f.option_values)
            except CellError as exc:
                errors.append({"field": f.name, "msg": str(exc)})
                continue
            if f.required and value is None:
                errors.append({"field": f.name, "msg": f"{f.label} is required"})
                continue
            record[f.name] = value
        return record, errors

    async def submit(self, values: Mapping[str, Any]) -> ActionResult:
        self.visible = True
        self.values = {f.name: values.get(f.name, f.initial_value) for f in self.fields}

        record, errors = self.build_record(values)
        if errors:
            self.field_errors = errors
            return ActionResult.invalid("Please correct the highlighted fields.", errors)

        try:
            created = await self.on_submit(record)
        except GatewayError as exc:
            logger.info("Form submission rejected: %s %s", exc.code, exc.msg)
            self.field_errors = exc.field_errors or []
            return ActionResult.failed(exc)

        self.close()
        return ActionResult(ok=True, notification=success(INSERTED_MESSAGE), data=created)
