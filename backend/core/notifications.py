"""Transient user-facing messages and the result type of user actions."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from core.errors import GatewayError


class Level(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    level: Level
    message: str


def success(message: str) -> Notification:
    return Notification(level=Level.SUCCESS, message=message)


def warning(message: str) -> Notification:
    return Notification(level=Level.WARNING, message=message)


def error(message: str) -> Notification:
    return Notification(level=Level.ERROR, message=message)


@dataclass
class ActionResult:
    """Outcome of one user action. Failures carry the uniform error shape."""

    ok: bool
    notification: Notification | None = None
    error: dict[str, Any] | None = None
    field_errors: list[dict[str, Any]] | None = None
    data: Any = None

    @classmethod
    def failed(cls, exc: GatewayError, **kwargs: Any) -> "ActionResult":
        return cls(
            ok=False,
            notification=error(exc.msg),
            error=exc.as_dict(),
            field_errors=exc.field_errors,
            **kwargs,
        )

    @classmethod
    def invalid(cls, message: str, field_errors: list[dict[str, Any]], **kwargs: Any) -> "ActionResult":
        """A failure caught before any backend call."""
        return cls(
            ok=False,
            notification=error(message),
            error={"code": 422, "msg": message, "fieldErrors": field_errors},
            field_errors=field_errors,
            **kwargs,
        )
