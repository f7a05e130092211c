"""REST gateway to the records backend.

Translates (form, sector, page, limit, filters, record) into single HTTP
calls against the backend CRUD endpoints. No retries and no caching; every
failure surfaces as a GatewayError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
import pydantic

from core.auth import AuthTokens
from core.errors import ErrorKind, GatewayError
from core.registry import get_form
from core.schema import RECORD_ID_KEY, FormDefinition, FormEnum, Sector


logger = logging.getLogger(__name__)

Record = dict[str, Any]


@dataclass
class Page:
    """One page of records plus the unpaginated total for the current filter."""

    records: list[Record]
    total: int
    page: int
    limit: int

    def __post_init__(self) -> None:
        if self.page < 1 or self.limit < 1:
            raise ValueError("page and limit must be at least 1")
        if self.total < 0:
            raise ValueError("total cannot be negative")
        if len(self.records) > self.limit:
            raise ValueError(
                f"page holds {len(self.records)} records but limit is {self.limit}"
            )


@dataclass
class BatchResult:
    count: int
    records: list[Record] = field(default_factory=list)


def _field_errors(exc: pydantic.ValidationError, row: int | None = None) -> list[dict[str, Any]]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        entry: dict[str, Any] = {}
        if row is not None:
            entry["row"] = row
        entry["field"] = str(loc[0]) if loc else None
        entry["msg"] = err["msg"]
        errors.append(entry)
    return errors


def validate_record(
    definition: FormDefinition, record: Record, row: int | None = None
) -> Record:
    """Validate a record against the form's declared fields.

    Returns the JSON-ready record holding only declared fields (and the
    backend id when present).

    Raises:
        GatewayError: code 422 with per-field errors
    """
    model = definition.record_model()
    try:
        instance = model.model_validate(record)
    except pydantic.ValidationError as exc:
        errors = _field_errors(exc, row)
        raise GatewayError(
            code=422,
            msg="Validation failed",
            field_errors=errors,
            payload={"msg": "Validation failed", "errors": errors},
        ) from exc
    data = instance.model_dump(mode="json", by_alias=True)
    if data.get(RECORD_ID_KEY) is None:
        data.pop(RECORD_ID_KEY, None)
    return data


def _unwrap(data: Any) -> Record:
    if isinstance(data, dict) and isinstance(data.get("model"), dict):
        return data["model"]
    return data if isinstance(data, dict) else {}


class FormsGateway:
    """Backend CRUD calls for one session's bearer token."""

    def __init__(self, client: httpx.AsyncClient, access_token: str | None = None):
        self._client = client
        self._access_token = access_token

    @property
    def _headers(self) -> dict[str, str]:
        if not self._access_token:
            return {}
        return {"Authorization": f"Bearer {self._access_token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, headers=self._headers, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise GatewayError.from_transport(exc) from exc

        if response.is_error:
            error = GatewayError.from_response(response)
            logger.warning("%s %s returned %s: %s", method, path, error.code, error.msg)
            raise error
        return response

    @staticmethod
    def _json(response: httpx.Response, empty: Any = None) -> Any:
        """Decode a JSON body. An empty body yields ``empty`` when one is given."""
        if not response.content and empty is not None:
            return empty
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Non-JSON body from backend for %s: %s", response.request.url.path, exc)
            raise GatewayError(
                code=502, msg="The server returned an invalid response.", kind=ErrorKind.SERVER
            ) from exc

    def _tokens(self, response: httpx.Response) -> AuthTokens:
        try:
            return AuthTokens.from_payload(self._json(response))
        except ValueError as exc:
            raise GatewayError(
                code=502, msg="The server returned invalid tokens.", kind=ErrorKind.SERVER
            ) from exc

    @staticmethod
    def _path(form: FormEnum, sector: Sector, *parts: Any) -> str:
        path = f"/forms/{Sector(sector).value}/{FormEnum(form).value}"
        for part in parts:
            path += f"/{part}"
        return path

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> AuthTokens:
        response = await self._request(
            "POST", "/auth/login", json={"username": username, "password": password}
        )
        return self._tokens(response)

    async def refresh(self, refresh_token: str) -> AuthTokens:
        response = await self._request(
            "POST", "/auth/refresh", json={"refreshToken": refresh_token}
        )
        return self._tokens(response)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def create(self, form: FormEnum, sector: Sector, record: Record) -> Record:
        body = validate_record(get_form(sector, form), record)
        body.pop(RECORD_ID_KEY, None)
        response = await self._request("POST", self._path(form, sector), json=body)
        return _unwrap(self._json(response, empty={}))

    async def update(self, form: FormEnum, sector: Sector, record: Record) -> Record:
        """Replace a whole record. The record must carry its backend id."""
        record_id = record.get(RECORD_ID_KEY)
        if record_id in (None, ""):
            errors = [{"field": RECORD_ID_KEY, "msg": "Missing record id"}]
            raise GatewayError(code=422, msg="Missing record id", field_errors=errors)

        body = validate_record(get_form(sector, form), record)
        response = await self._request(
            "PUT", self._path(form, sector, record_id), json=body
        )
        return _unwrap(self._json(response, empty={}))

    async def delete(self, form: FormEnum, sector: Sector, record_id: str) -> None:
        await self._request("DELETE", self._path(form, sector, record_id))

    async def save_many(
        self, form: FormEnum, sector: Sector, records: list[Record]
    ) -> BatchResult:
        definition = get_form(sector, form)
        models = []
        errors: list[dict[str, Any]] = []
        for row, record in enumerate(records):
            try:
                models.append(validate_record(definition, record, row=row))
            except GatewayError as exc:
                errors.extend(exc.field_errors or [])
        if errors:
            raise GatewayError(
                code=422,
                msg="Validation failed",
                field_errors=errors,
                payload={"msg": "Validation failed", "errors": errors},
            )

        response = await self._request(
            "POST", self._path(form, sector, "batch"), json={"models": models}
        )
        data = self._json(response, empty={})
        if not isinstance(data, dict):
            data = {}
        saved = list(data.get("models") or [])
        return BatchResult(count=int(data.get("count", len(saved) or len(models))), records=saved)

    # Defined last: the name shadows the builtin inside the class body.
    async def list(
        self,
        form: FormEnum,
        sector: Sector,
        page: int,
        limit: int,
        filters: dict[str, Any] | None = None,
    ) -> Page:
        params: dict[str, Any] = {"page": page, "limit": limit}
        for name, value in (filters or {}).items():
            if name in ("page", "limit"):
                continue
            params[name] = value

        response = await self._request("GET", self._path(form, sector), params=params)
        data = self._json(response)
        try:
            return Page(
                records=list(data.get("models") or []),
                total=int(data.get("total") or 0),
                page=page,
                limit=limit,
            )
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Malformed page from backend for %s: %s", form, exc)
            raise GatewayError(
                code=502, msg="The server returned an invalid page.", kind=ErrorKind.SERVER
            ) from exc
