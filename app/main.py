import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from loguru import logger

from app.api.plans import router as plans_router
from app.api.profile import router as profile_router
from app.config.settings import settings
from app.core import random_source
from app.core.logger import setup_logger
from app.db.models import Base
from app.db.session import get_engine

setup_logger(level=settings.log_level, log_file=settings.log_file)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan - create tables and seed the random source once.

    Note: FastAPI requires async for lifespan context manager,
    even if no await operations are used.
    """
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables verified")

    random_source.configure(settings.plan_random_seed)

    await asyncio.sleep(0)
    yield

    logger.info("Application shutting down")


app = FastAPI(title="Fitness Plan Engine", lifespan=lifespan)

app.include_router(plans_router)
app.include_router(profile_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response
