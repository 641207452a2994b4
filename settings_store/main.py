from contextlib import asynccontextmanager

from fastapi import FastAPI

from settings_store.core.config import get_config
from settings_store.database import create_db_engine
from settings_store.routers import settings
from settings_store.services.factory import build_cache, create_store

import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    app.state.cache = build_cache(config)
    app.state.engine = (
        create_db_engine(config.database_url) if config.backend == "db" else None
    )
    # Bring the backend up once so configuration errors surface at startup
    create_store(config, engine=app.state.engine, cache=app.state.cache)
    logger.info(f"Settings store ready ({config.backend} backend)")
    yield
    if app.state.engine is not None:
        app.state.engine.dispose()
    if hasattr(app.state.cache, "close"):
        app.state.cache.close()


app = FastAPI(
    title="Settings Store API",
    description="Categorised key/value settings backed by files or a database",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(settings.router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
