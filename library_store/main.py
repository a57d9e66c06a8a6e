from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from library_store.core.config import settings
from library_store.core.middleware_correlation import CorrelationIdMiddleware
from library_store.core.logging import setup_logging, get_logger
from library_store.core.errors import register_exception_handlers
from library_store.db.session import init_db

# Routers
from library_store.api.routes.books import router as books_router


setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    init_db()
    get_logger(__name__).info("Database ready at %s", settings.DATABASE_URL)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Library Store API - create, list, edit and delete library books.",
    version="1.0.0",
    lifespan=lifespan,
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Health check endpoint
@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Library Store API is running!"

register_exception_handlers(app)

# Mount routers
app.include_router(books_router)
