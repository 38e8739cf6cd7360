"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from menu_backend.config import get_settings
from menu_backend.database import engine, create_tables
from menu_backend import models  # noqa: F401  registers the tables on Base
from menu_backend.api import proxy, menu, context, guests, cache
from menu_backend.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("Database tables created")

    if not settings.openai_key:
        logger.warning("No OpenAI API key configured; proxy answers 500 and texts use templates")

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(proxy.router, prefix="/api", tags=["OpenAI Proxy"])
app.include_router(menu.router, prefix="/api/menu", tags=["Menu"])
app.include_router(context.router, prefix="/api/context", tags=["Context"])
app.include_router(guests.router, prefix="/api", tags=["Guests"])
app.include_router(cache.router, prefix="/api/cache", tags=["Cache"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "menu_backend.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG
    )
