import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shareit.api.routes.expense import router as expense_router
from shareit.api.routes.family import router as family_router
from shareit.api.routes.group import router as group_router
from shareit.api.routes.system import router as system_router
from shareit.core.config import Settings, get_settings
from shareit.core.db_check import wait_for_db
from shareit.db.session import Base, build_engine, build_sessionmaker
import shareit.models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    engine = app.state.engine

    await wait_for_db(engine, retries=settings.DB_CONNECT_RETRIES)

    if settings.AUTO_CREATE_TABLES:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Share-It : Tables created")

    yield

    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(title="Share-It Backend", lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.sessionmaker = build_sessionmaker(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.get("/")
    async def root():
        return {"message": "Share-It Backend is live"}

    app.include_router(system_router, prefix="/api")
    app.include_router(group_router, prefix="/api/groups")
    app.include_router(family_router, prefix="/api/families")
    app.include_router(expense_router, prefix="/api/expenses")

    return app


app = create_app()
