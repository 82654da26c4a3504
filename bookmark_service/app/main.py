from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import close_client

from .api.errors import register_exception_handlers
from .api.health import router as health_router
from .api.v1 import api_router
from .auth.oauth import create_oauth
from .config import AppConfig, load_config
from .web.auth import router as auth_router
from .web.pages import router as pages_router
from .web.templating import STATIC_DIR


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - framework hook
    yield
    close_client()


def create_app(config: AppConfig | None = None) -> FastAPI:
    setup_logger()
    config = config or load_config()

    app = FastAPI(
        title="Smart Bookmark Manager",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.oauth = create_oauth(config.oauth)

    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session.secret_key,
        max_age=config.session.max_age_seconds,
        same_site="lax",
        https_only=config.session.https_only,
    )
    # 공통 Request/Span ID 로그 미들웨어 (가장 바깥)
    app.add_middleware(RequestTraceMiddleware)

    register_exception_handlers(app)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix="/api/v1")
    app.include_router(auth_router, prefix="/auth")
    app.include_router(pages_router)

    return app


def main() -> None:
    import uvicorn

    port = int(os.getenv("BOOKMARK_SERVICE_PORT", "8000"))
    uvicorn.run(
        "bookmark_service.app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
