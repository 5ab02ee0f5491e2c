from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.router import api_router
from src.db.pool import close_pool, get_pool
from src.utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    setup_logging()
    await get_pool()
    yield
    await close_pool()


app = FastAPI(
    title="Competitor Price Intelligence",
    version="0.1.0",
    description="Scrapes competitor salon price lists and tracks refresh runs",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api")
