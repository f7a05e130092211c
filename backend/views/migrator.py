"""Bulk import of externally parsed rows.

Rows come in already split into cells (pasted or imported by the front end).
Each cell is checked against its column's declared type, then the whole row
against the form's record model (required fields and select options). Rows
that fail either check are flagged and left out, and the well-formed rows go
to the backend in one batch.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from core.coercion import CellError, coerce_cell
from core.errorlog import ErrorLog
from core.errors import GatewayError
from core.gateway import validate_record
from core.notifications import ActionResult, error, success, warning
from core.schema import FormDefinition, MigratorColumn


logger = logging.getLogger(__name__)

SaveCallback = Callable[[list[dict[str, Any]]], Awaitable[Any]]

SAVED_MESSAGE = "Data successfully updated."


@dataclass
class RowReport:
    index: int
    record: dict[str, Any]
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


@dataclass
class MigrationSummary:
    submitted: int
    flagged: list[RowReport]
    saved: int = 0


class DataMigrator:
    def __init__(
        self,
        columns: Iterable[MigratorColumn],
        on_save: SaveCallback,
        error_log: ErrorLog | None = None,
        sector: str | None = None,
        form: str | None = None,
        definition: FormDefinition | None = None,
    ):
        self.columns = tuple(columns)
        self.on_save = on_save
        self.error_log = error_log
        self.sector = sector
        self.form = form
        self.definition = definition

    def validate_row(self, index: int, row: Mapping[str, Any]) -> RowReport:
        report = RowReport(index=index, record={})
        for column in self.columns:
            raw = row.get(column.field)
            try:
                report.record[column.field] = coerce_cell(raw, column.type)
            except CellError as exc:
                report.record[column.field] = raw
                report.errors[column.field] = str(exc)
        if report.valid and self.definition is not None:
            self._check_record(report)
        return report

    def _check_record(self, report: RowReport) -> None:
        try:
            validate_record(self.definition, report.record, row=report.index)
        except GatewayError as exc:
            for entry in exc.field_errors or []:
                report.errors.setdefault(entry.get("field") or "", entry["msg"])

    def validate(self, rows: Iterable[Mapping[str, Any]]) -> list[RowReport]:
        return [self.validate_row(i, row) for i, row in enumerate(rows)]

    async def save(self, rows: Iterable[Mapping[str, Any]]) -> ActionResult:
        reports = self.validate(rows)
        batch = [r.record for r in reports if r.valid]
        summary = MigrationSummary(
            submitted=len(batch),
            flagged=[r for r in reports if not r.valid],
        )

        if not batch:
            return ActionResult(
                ok=False,
                notification=warning("No valid rows to save."),
                error={"code": 422, "msg": "No valid rows to save."},
                data=summary,
            )

        try:
            result = await self.on_save(batch)
        except GatewayError as exc:
            if exc.is_validation and self.error_log is not None:
                self.error_log.add(exc.payload, sector=self.sector, form=self.form)
                logger.info("Bulk save for %s rejected, logged %s field errors",
                            self.form, len(exc.field_errors or []))
            return ActionResult.failed(exc, data=summary)

        summary.saved = getattr(result, "count", len(batch))
        message = SAVED_MESSAGE
        if summary.flagged:
            message = f"{message} {len(summary.flagged)} row(s) skipped."
        notification = success(message) if not summary.flagged else warning(message)
        return ActionResult(ok=True, notification=notification, data=summary)
