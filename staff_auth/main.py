# staff-auth/staff_auth/main.py
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from staff_auth.api.api import api_router
from staff_auth.core.config import Settings, get_settings
from staff_auth.core.errors import register_exception_handlers
from staff_auth.core.logging import configure_logging
from staff_auth.core.security import PasswordHasher, TokenIssuer
from staff_auth.db.session import Database
from staff_auth.services.auth import Clock, utcnow

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    clock: Clock = utcnow,
) -> FastAPI:
    if settings is None:
        settings = get_settings()
    if database is None:
        database = Database(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.connect()
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title="Staff Auth API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.hasher = PasswordHasher(settings.PASSWORD_HASH_ROUNDS)
    app.state.tokens = TokenIssuer.from_settings(settings)
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def read_root():
        return {"message": "Hello, World!"}

    return app


def main() -> None:
    """Console entry point: exits non-zero when startup preconditions fail."""
    configure_logging()
    try:
        settings = get_settings()
    except ValidationError as exc:
        missing = ", ".join(str(err["loc"][0]) for err in exc.errors())
        logger.error("Missing or invalid configuration: %s", missing)
        sys.exit(1)
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

    database = Database(settings.DATABASE_URL)
    try:
        database.connect()
    except SQLAlchemyError as exc:
        logger.error("Database connection failed (%s). Exiting.", type(exc).__name__)
        sys.exit(1)

    app = create_app(settings, database=database)
    logger.info("Server listening at http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
