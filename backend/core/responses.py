from dataclasses import dataclass
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from core.notifications import ActionResult
from core.schema import ColumnSchema


@dataclass
class ColumnMeta:
    """Metadata for a column in a table response."""

    key: str
    label: str
    type: str  # "text", "number", "date", "select"
    editable: bool = False
    values: list[Any] | None = None


@dataclass
class MultiRowResponse:
    """Response containing multiple rows with column metadata."""

    columns: list[ColumnMeta]
    data: list[dict[str, Any]]


@dataclass
class PageResponse:
    """One page of rows with column metadata and the unpaginated total."""

    columns: list[ColumnMeta]
    data: list[dict[str, Any]]
    total: int
    page: int
    limit: int


def column_meta(columns: tuple[ColumnSchema, ...] | list[ColumnSchema]) -> list[ColumnMeta]:
    return [
        ColumnMeta(
            key=c.field,
            label=c.header_name,
            type=c.value_type.value,
            editable=c.editable,
            values=list(c.values) or None,
        )
        for c in columns
    ]


def failure_status(result: ActionResult) -> int:
    """HTTP status for a failed action: the backend's 4xx/503, else 502."""
    code = (result.error or {}).get("code")
    if isinstance(code, int) and (400 <= code < 500 or code == 503):
        return code
    return 502


def respond(body: Any, result: ActionResult, status_code: int = 200) -> JSONResponse:
    """Serialize ``body``, using the failure status when ``result`` failed."""
    if not result.ok:
        status_code = failure_status(result)
    return JSONResponse(jsonable_encoder(body), status_code=status_code)
