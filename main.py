"""
Social Posts API: application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from api.posts import router as posts_router
from auth.routes import router as users_router
from config.settings import Settings, config
from database.session import build_engine, build_session_factory, init_models
from utils.schemas import HealthResponse

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config
    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info("Creating database tables…")
        await init_models(engine)
        logger.info("Application ready to accept requests.")
        yield
        await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        description="User accounts and per-user posts.",
        debug=settings.debug,
        lifespan=lifespan,
        # DELETE /posts/ must reach the bulk-delete guard, not be redirected.
        redirect_slashes=False,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app, debug=settings.debug)

    # Routes
    app.include_router(users_router)
    app.include_router(posts_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return {"status": "ok", "app": settings.app_name}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
