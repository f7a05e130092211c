from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.catalog import resolve_form
from core.auth import Session, provide_current_session
from core.gateway import FormsGateway
from core.guards import require_session
from core.responses import respond
from core.schema import FormDefinition
from core.state import provide_gateway
from views.migrator import DataMigrator, RowReport


@dataclass
class MigrationRows:
    rows: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ValidationResponse:
    rows: list[RowReport]
    valid: int
    flagged: int


router = APIRouter(
    prefix="/api/forms/{sector}/{form}/migrator",
    tags=["migrator"],
    dependencies=[Depends(require_session)],
)


def provide_migrator(
    definition: FormDefinition = Depends(resolve_form),
    gateway: FormsGateway = Depends(provide_gateway),
    current_session: Session = Depends(provide_current_session),
) -> DataMigrator:
    async def save(records: list[dict[str, Any]]):
        return await gateway.save_many(definition.form, definition.sector, records)

    return DataMigrator(
        definition.cell_columns,
        save,
        error_log=current_session.error_log,
        sector=definition.sector.value,
        form=definition.form.value,
        definition=definition,
    )


@router.post("/validate")
async def validate_rows(
    data: MigrationRows,
    migrator: DataMigrator = Depends(provide_migrator),
) -> ValidationResponse:
    """Check every row against its column types and the form without saving."""
    reports = migrator.validate(data.rows)
    flagged = sum(1 for r in reports if not r.valid)
    return ValidationResponse(rows=reports, valid=len(reports) - flagged, flagged=flagged)


@router.post("/save")
async def save_rows(
    data: MigrationRows,
    migrator: DataMigrator = Depends(provide_migrator),
) -> JSONResponse:
    """Save the well-formed rows in one batch."""
    result = await migrator.save(data.rows)
    return respond(result, result)
