import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from .core.config import settings
from .core.cors import setup_cors
from .core.logging_config import setup_logging
from .core.redis_manager import close_redis
from .api.v1.routers import formatting as formatting_router
from .api.v1.routers import profiles as profiles_router
from .api.v1.routers import quizzes as quizzes_router

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.APP_ENV)
    yield
    await close_redis()

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
setup_cors(app)

app.include_router(quizzes_router.router, prefix=settings.API_V1_PREFIX)
app.include_router(profiles_router.router, prefix=settings.API_V1_PREFIX)
app.include_router(formatting_router.router, prefix=settings.API_V1_PREFIX)

@app.get("/healthz")
async def healthz():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.BACKEND_PORT)
