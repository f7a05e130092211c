from dataclasses import dataclass

from fastapi import APIRouter, Depends, HTTPException

from core.guards import require_session
from core.registry import UnknownFormError, forms_by_sector, get_form
from core.responses import ColumnMeta, column_meta
from core.schema import FieldSchema, FormDefinition, MigratorColumn


def resolve_form(sector: str, form: str) -> FormDefinition:
    """Path dependency that turns ``{sector}/{form}`` into a form definition."""
    try:
        return get_form(sector, form)
    except UnknownFormError:
        raise HTTPException(status_code=404, detail="Form not found") from None


@dataclass
class FormSummary:
    form: str
    title: str


@dataclass
class SectorResponse:
    sector: str
    forms: list[FormSummary]


@dataclass
class SchemaResponse:
    form: str
    sector: str
    title: str
    fields: list[FieldSchema]
    columns: list[ColumnMeta]
    migrator_columns: list[MigratorColumn]


router = APIRouter(prefix="/api", tags=["forms"], dependencies=[Depends(require_session)])


@router.get("/sectors")
async def list_sectors() -> list[SectorResponse]:
    """List every sector with the forms it groups."""
    return [
        SectorResponse(
            sector=sector.value,
            forms=[FormSummary(form=d.form.value, title=d.title) for d in definitions],
        )
        for sector, definitions in forms_by_sector().items()
    ]


@router.get("/forms/{sector}/{form}/schema")
async def get_schema(definition: FormDefinition = Depends(resolve_form)) -> SchemaResponse:
    """Field, column and migrator schema of one form."""
    return SchemaResponse(
        form=definition.form.value,
        sector=definition.sector.value,
        title=definition.title,
        fields=list(definition.fields),
        columns=column_meta(definition.columns),
        migrator_columns=list(definition.cell_columns),
    )
