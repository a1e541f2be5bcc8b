"""
Blog service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.middleware import register_middleware
from api.routes import router as blog_router
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from config.settings import Settings
from database.session import build_engine, build_session_factory, init_models
from utils.uploads import ImageStorage

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("aiosqlite", "sqlalchemy.engine", "multipart"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    engine = build_engine(settings.database_url, echo=False)
    storage = ImageStorage(
        settings.upload_dir,
        settings.allowed_image_extensions,
        settings.max_upload_bytes,
    )
    storage.ensure_directory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.uses_default_secret:
            logger.warning("JWT_SECRET not set — tokens are signed with the built-in default key")
        logger.info("Creating tables…")
        await init_models(engine)
        logger.info("Application ready to accept requests.")
        yield
        await engine.dispose()

    app = FastAPI(
        title="Blog Service",
        version="1.0.0",
        description="User registration, token auth and owner-restricted blog CRUD.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_issuer = TokenIssuer(settings.jwt_secret, settings.jwt_expiry_seconds)
    app.state.image_storage = storage

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router)
    app.include_router(blog_router)
    app.mount("/uploads", StaticFiles(directory=str(storage.directory)), name="uploads")

    return app


if __name__ == "__main__":
    _settings = Settings()
    configure_logging(_settings)
    uvicorn.run(
        create_app(_settings),
        host=_settings.host,
        port=_settings.port,
        log_level="debug" if _settings.debug else "info",
    )
