"""Background refresh of session bearer tokens."""

import asyncio
import contextlib
import logging
from datetime import datetime, timedelta, timezone

from core.errors import GatewayError
from core.state import AppState


logger = logging.getLogger(__name__)


class TokenRefresher:
    """Refreshes every non-idle session's tokens on a fixed interval.

    Runs beside request handling; a failed refresh is logged and the session
    keeps its current tokens until the next tick.
    """

    def __init__(self, app_state: AppState, interval: float, idle_after: float):
        self.app_state = app_state
        self.interval = interval
        self.idle_after = timedelta(seconds=idle_after)
        self._task: asyncio.Task | None = None

    async def refresh_once(self, now: datetime | None = None) -> int:
        """Run one tick. Returns the number of sessions refreshed."""
        now = now or datetime.now(timezone.utc)
        pruned = self.app_state.sessions.prune(now)
        if pruned:
            logger.info("Pruned %s expired sessions", pruned)

        refreshed = 0
        for session in self.app_state.sessions.active():
            if session.is_idle(self.idle_after, now):
                continue
            try:
                tokens = await self.app_state.gateway().refresh(session.tokens.refresh_token)
            except GatewayError as exc:
                logger.warning("Token refresh failed for %s: %s", session.username, exc)
                continue
            session.tokens = tokens
            refreshed += 1
        return refreshed

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.refresh_once()
            except Exception:
                logger.exception("Token refresh tick failed")

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
