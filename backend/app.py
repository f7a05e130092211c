import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import httpx
from fastapi import FastAPI

from core.config import AppConfig
from core.middleware import SessionMiddleware
from core.refresher import TokenRefresher
from core.state import AppState, SessionStore
from api.auth import router as auth_router
from api.catalog import router as catalog_router
from api.entry import router as entry_router
from api.errorlog import router as errorlog_router
from api.grid import router as grid_router
from api.health import router as health_router
from api.migrator import router as migrator_router
from api.report import router as report_router


logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        config: Configuration to use instead of loading CONFIG_FILE
        transport: httpx transport for the backend client (tests pass a mock)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app_config = config or AppConfig.load()
        logger.info("Config loaded: backend=%s", app_config.backend.base_url)

        client = httpx.AsyncClient(
            base_url=app_config.backend.base_url,
            timeout=app_config.backend.timeout,
            transport=transport,
        )
        app.state.runtime = AppState(
            config=app_config,
            client=client,
            sessions=SessionStore(app_config.session.expire_minutes),
        )

        refresher = TokenRefresher(
            app.state.runtime,
            interval=app_config.session.refresh_interval_seconds,
            idle_after=app_config.session.idle_after_seconds,
        )
        refresher.start()
        logger.info("Token refresher started")

        yield

        await refresher.stop()
        app.state.runtime.sessions.clear()
        await client.aclose()
        logger.info("Backend client closed")

    app = FastAPI(title="Environmental Statistics Data Entry", lifespan=lifespan)
    app.add_middleware(SessionMiddleware)
    for router in (
        auth_router,
        health_router,
        catalog_router,
        entry_router,
        grid_router,
        migrator_router,
        report_router,
        errorlog_router,
    ):
        app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    server = AppConfig.load().server
    uvicorn.run("app:app", host=server.host, port=server.port)
