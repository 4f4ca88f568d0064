# app/main.py

from contextlib import asynccontextmanager
import logging
from fastapi import Depends, FastAPI
from app.config import ProcessConfig, get_config
from app.routers import cache
from app.schemas.cache import HealthResponse
from app.services.cache_factory import close_cache, get_cache

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: select the cache backend once for the process
    backend = get_cache()
    logger.info("Cache backend ready: %s", backend.name)
    try:
        yield
    finally:
        # Shutdown: release the remote connection pool, if any
        await close_cache()

app = FastAPI(lifespan=lifespan)
app.include_router(cache.router)


@app.get("/health", response_model=HealthResponse)
def health_check(config: ProcessConfig = Depends(get_config)):
    return HealthResponse(backend=get_cache().name, cacheEnabled=config.enable_cache)
