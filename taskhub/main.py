import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from taskhub.config import settings
from taskhub.db import dispose_engine
from taskhub.errors import register_exception_handlers
from taskhub.routes.auth import router as auth_router
from taskhub.routes.comments import router as comments_router
from taskhub.routes.dashboard import router as dashboard_router
from taskhub.routes.health import router as health_router
from taskhub.routes.projects import router as projects_router
from taskhub.routes.tasks import router as tasks_router
from taskhub.routes.users import router as users_router

logger = logging.getLogger(__name__)

def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("starting taskhub-api (%s)", settings.app_env)
    yield
    dispose_engine()
    logger.info("taskhub-api stopped")

def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="taskhub-api", version="0.1.0", lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(projects_router)
    app.include_router(tasks_router)
    app.include_router(comments_router)
    app.include_router(dashboard_router)
    return app

app = create_app()
