"""Generic paginated, inline-editable grid driven by a column schema."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from core.coercion import CellError, coerce_column
from core.errors import GatewayError
from core.gateway import Page
from core.notifications import ActionResult, Notification, error, success, warning
from core.schema import ColumnSchema, ValueType


logger = logging.getLogger(__name__)

FetchPage = Callable[[int, int], Awaitable[Page]]
RowUpdate = Callable[[dict[str, Any]], Awaitable[Any]]
RowDelete = Callable[[str], Awaitable[Any]]

UPDATED_MESSAGE = "Data successfully updated."
DELETED_MESSAGE = "Data successfully deleted."


@dataclass
class DeleteConfirmation:
    record_id: str
    title: str = "Confirm Delete"
    description: str = "Are you sure you want to delete this row?"


@dataclass
class GridState:
    page: int
    limit: int
    total: int
    rows: list[dict[str, Any]]
    loading: bool
    refresh_token: int
    page_size_options: list[int]
    pending_deletes: list[str] = field(default_factory=list)


class GridView:
    """Rows of one form, a page at a time.

    Page 1 loads on mount and again whenever the page, the page size or the
    refresh token change. Every fetch takes a generation number and only the
    newest fetch may replace the rows, so a slow response for an old page
    never overwrites a newer one.
    """

    def __init__(
        self,
        columns: Iterable[ColumnSchema],
        fetch_page: FetchPage,
        on_row_update: RowUpdate,
        on_delete: RowDelete,
        limit: int = 10,
        page_size_options: Iterable[int] = (10, 20, 50, 100),
    ):
        self.columns = tuple(columns)
        self.fetch_page = fetch_page
        self.on_row_update = on_row_update
        self.on_delete = on_delete
        self.page = 1
        self.limit = limit
        self.page_size_options = list(page_size_options)
        self.refresh_token = 0
        self.rows: list[dict[str, Any]] = []
        self.total = 0
        self.loading = False
        self.mounted = False
        self.notifications: list[Notification] = []
        self._generation = 0
        self._pending_deletes: set[str] = set()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        if not self.mounted:
            self.mounted = True
            await self.load()

    async def load(self) -> bool:
        """Fetch the current page. Returns True when the rows were replaced."""
        self._generation += 1
        generation = self._generation
        self.loading = True

        try:
            page = await self.fetch_page(self.page, self.limit)
        except GatewayError as exc:
            if generation == self._generation:
                self.loading = False
                self.notify(error(exc.msg))
            return False

        if generation != self._generation:
            logger.debug("Discarding stale page %s (limit %s)", page.page, page.limit)
            return False

        self.rows = [self._display_row(r) for r in page.records]
        self.total = page.total
        self.loading = False

        # Deleting the last row of the last page leaves the grid past the end.
        last_page = max(1, -(-self.total // self.limit))
        if not self.rows and self.page > last_page:
            self.page = last_page
            return await self.load()
        return True

    def _display_row(self, record: dict[str, Any]) -> dict[str, Any]:
        row = dict(record)
        for column in self.columns:
            if column.value_type != ValueType.DATE or column.field not in row:
                continue
            try:
                row[column.field] = coerce_column(row[column.field], column.value_type)
            except CellError:
                pass  # shown as received
        return row

    async def set_pagination(self, page: int, limit: int) -> None:
        """Move to ``page``; a new page size always starts again at page 1."""
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be at least 1")
        if limit != self.limit:
            self.limit = limit
            self.page = 1
        else:
            self.page = page
        await self.load()

    async def refresh(self) -> None:
        self.refresh_token += 1
        self.page = 1
        await self.load()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def prepare_row(self, row: dict[str, Any]) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        """Coerce the editable cells of an edited row to their column types."""
        edited = dict(row)
        errors = []
        for column in self.columns:
            if not column.editable or column.field not in edited:
                continue
            try:
                edited[column.field] = coerce_column(
                    edited[column.field], column.value_type, column.values
                )
            except CellError as exc:
                errors.append({"field": column.field, "msg": f"{column.header_name}: {exc}"})
        return edited, errors

    async def commit_row(self, row: dict[str, Any]) -> ActionResult:
        """Send the full edited row, then reload whatever the outcome."""
        edited, errors = self.prepare_row(row)
        if errors:
            result = ActionResult.invalid(errors[0]["msg"], errors)
        else:
            try:
                updated = await self.on_row_update(edited)
            except GatewayError as exc:
                result = ActionResult.failed(exc)
            else:
                result = ActionResult(ok=True, notification=success(UPDATED_MESSAGE), data=updated)

        self.notify(result.notification)
        await self.load()
        return result

    def request_delete(self, record_id: str) -> DeleteConfirmation:
        self._pending_deletes.add(str(record_id))
        return DeleteConfirmation(record_id=str(record_id))

    def cancel_delete(self, record_id: str) -> None:
        self._pending_deletes.discard(str(record_id))

    async def confirm_delete(self, record_id: str) -> ActionResult:
        record_id = str(record_id)
        if record_id not in self._pending_deletes:
            return ActionResult(
                ok=False,
                notification=warning("Delete was not confirmed."),
                error={"code": 409, "msg": "Delete was not confirmed."},
            )
        self._pending_deletes.discard(record_id)

        try:
            await self.on_delete(record_id)
        except GatewayError as exc:
            result = ActionResult.failed(exc)
        else:
            result = ActionResult(ok=True, notification=success(DELETED_MESSAGE))

        self.notify(result.notification)
        await self.load()
        return result

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def notify(self, notification: Notification | None) -> None:
        if notification is not None:
            self.notifications.append(notification)

    def drain_notifications(self) -> list[Notification]:
        notifications, self.notifications = self.notifications, []
        return notifications

    def state(self) -> GridState:
        return GridState(
            page=self.page,
            limit=self.limit,
            total=self.total,
            rows=self.rows,
            loading=self.loading,
            refresh_token=self.refresh_token,
            page_size_options=self.page_size_options,
            pending_deletes=sorted(self._pending_deletes),
        )
