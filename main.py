import uvicorn
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import api_router
from api.errors import register_exception_handlers
from api.middleware import RateLimitMiddleware
from config.settings import VERSION, Settings
from core.container import Container
from database.connection import create_db_and_tables, create_db_engine
from database.seed import seed_database
from services.background import BackgroundRunner
from services.mailer import Mailer
from utils.logger import get_logger

# Initialize logger
logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    mailer: Optional[Mailer] = None,
    background: Optional[BackgroundRunner] = None,
) -> FastAPI:
    """Build the application and its dependency container. Tests pass their own collaborators."""
    settings = settings or Settings.from_env()
    container = Container(
        settings=settings,
        engine=create_db_engine(settings),
        mailer=mailer or Mailer.from_settings(settings),
        background=background or BackgroundRunner(max_workers=settings.background_workers),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - runs on startup and shutdown"""
        logger.info(f"Starting application ({settings.environment})...")
        create_db_and_tables(container.engine)
        logger.info("Database tables created/verified")
        seed_database(container.engine, settings)
        logger.info("Database seeded with permissions")
        yield
        logger.info("Shutting down application...")
        if not container.background.drain(timeout=settings.shutdown_timeout):
            logger.warning("Background tasks did not finish before the shutdown timeout")
        container.engine.dispose()
        logger.info("Application stopped")

    app = FastAPI(
        title="Greenlight",
        version=VERSION,
        description="Greenlight API",
        lifespan=lifespan,
    )
    app.state.container = container

    register_exception_handlers(app)

    # Include API routes
    app.include_router(api_router, prefix="/v1")

    # Rate limiting, then CORS as the outermost layer
    app.add_middleware(
        RateLimitMiddleware,
        rps=settings.limiter_rps,
        burst=settings.limiter_burst,
        enabled=settings.limiter_enabled,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_trusted_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


if __name__ == "__main__":
    settings = app.state.container.settings
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
