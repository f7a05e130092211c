"""Read-only, filterable listing of a form's records."""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from core.coercion import CellError, coerce_widget, is_blank
from core.errors import GatewayError
from core.gateway import Page
from core.notifications import ActionResult
from core.schema import ColumnSchema, FieldSchema, Option, WidgetKind


FetchFiltered = Callable[[int, int, dict[str, Any]], Awaitable[Page]]


@dataclass
class FilterControl:
    name: str
    label: str
    widget: WidgetKind
    options: list[Option] = field(default_factory=list)


@dataclass
class ReportPage:
    """The filters a query ran with and, when it succeeded, the page it got."""

    filters: dict[str, Any]
    page: Page | None = None


class ReportView:
    """Filters are ANDed; every non-empty filter narrows the listing."""

    def __init__(
        self,
        fields: Iterable[FieldSchema],
        columns: Iterable[ColumnSchema],
        fetch_page: FetchFiltered,
    ):
        self.fields = {f.name: f for f in fields}
        self.columns = tuple(columns)
        self.fetch_page = fetch_page

    def filter_controls(self) -> list[FilterControl]:
        return [
            FilterControl(name=f.name, label=f.label, widget=f.widget_kind, options=list(f.options))
            for f in self.fields.values()
        ]

    def build_filters(self, raw: Mapping[str, Any]) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        filters: dict[str, Any] = {}
        errors = []
        for name, value in raw.items():
            if is_blank(value):
                continue
            schema = self.fields.get(name)
            if schema is None:
                errors.append({"field": name, "msg": "Unknown filter"})
                continue
            try:
                filters[name] = coerce_widget(value, schema.widget_kind, schema.option_values)
            except CellError as exc:
                errors.append({"field": name, "msg": str(exc)})
        return filters, errors

    async def query(self, raw_filters: Mapping[str, Any], page: int = 1, limit: int = 10) -> ActionResult:
        filters, errors = self.build_filters(raw_filters)
        if errors:
            return ActionResult.invalid("Invalid filters.", errors, data=ReportPage(filters))

        try:
            result = await self.fetch_page(page, limit, filters)
        except GatewayError as exc:
            return ActionResult.failed(exc, data=ReportPage(filters))
        return ActionResult(ok=True, data=ReportPage(filters, result))
