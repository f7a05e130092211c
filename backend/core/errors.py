"""Uniform error shape for failures reported by the records backend."""

from enum import StrEnum
from typing import Any

import httpx


class ErrorKind(StrEnum):
    NETWORK = "network"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    SERVER = "server"


_DEFAULT_MESSAGES = {
    ErrorKind.NETWORK: "Unable to reach the server. Please try again.",
    ErrorKind.VALIDATION: "Some values are invalid.",
    ErrorKind.NOT_FOUND: "Record not found.",
    ErrorKind.CONFLICT: "The record was changed by someone else.",
    ErrorKind.UNAUTHORIZED: "Your session has expired. Please log in again.",
    ErrorKind.SERVER: "Something went wrong.",
}


def kind_for_status(status: int) -> ErrorKind:
    if status == 422:
        return ErrorKind.VALIDATION
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status == 409:
        return ErrorKind.CONFLICT
    if status in (401, 403):
        return ErrorKind.UNAUTHORIZED
    return ErrorKind.SERVER


class GatewayError(Exception):
    """A failed backend call as ``{code, msg, field_errors}``.

    ``payload`` keeps the backend's response body untouched so the bulk path
    can store it in the error log exactly as received.
    """

    def __init__(
        self,
        code: int,
        msg: str | None = None,
        field_errors: list[dict[str, Any]] | None = None,
        kind: ErrorKind | None = None,
        payload: Any = None,
    ):
        self.code = code
        self.kind = kind or kind_for_status(code)
        self.msg = msg or _DEFAULT_MESSAGES[self.kind]
        self.field_errors = field_errors
        self.payload = payload
        super().__init__(self.msg)

    @property
    def is_validation(self) -> bool:
        return self.kind == ErrorKind.VALIDATION

    @classmethod
    def from_response(cls, response: httpx.Response) -> "GatewayError":
        try:
            data = response.json()
        except ValueError:
            data = None

        msg = None
        field_errors = None
        if isinstance(data, dict):
            msg = data.get("msg") or data.get("message")
            errors = data.get("errors")
            if isinstance(errors, list):
                field_errors = errors
        return cls(
            code=response.status_code,
            msg=msg,
            field_errors=field_errors,
            payload=data,
        )

    @classmethod
    def from_transport(cls, exc: httpx.TransportError) -> "GatewayError":
        return cls(code=503, kind=ErrorKind.NETWORK, payload={"detail": str(exc)})

    def as_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code, "msg": self.msg}
        if self.field_errors is not None:
            result["fieldErrors"] = self.field_errors
        return result
