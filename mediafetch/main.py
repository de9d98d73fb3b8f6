import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from mediafetch.api.routes_api import router as api_router
from mediafetch.core.config import get_settings
from mediafetch.providers import ProviderRegistry, register_provider
from mediafetch.providers.anime_provider import AnimeProvider
from mediafetch.providers.movies_provider import MoviesProvider
from mediafetch.providers.tv_provider import TVProvider
from mediafetch.providers.yts_provider import YtsMoviesProvider

load_dotenv()

settings = get_settings()
logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    try:
        yield
    finally:
        # Teardown providers
        for provider in ProviderRegistry.all():
            provider.cancel_all()
            try:
                await provider.aclose()
            except Exception as e:
                logger.error(f"Error closing provider {provider.name}: {e}")


app = FastAPI(
    title="mediafetch",
    description="Resilient media catalog fetch layer",
    version="0.1.0",
    lifespan=app_lifespan,
)

# Register providers
register_provider(YtsMoviesProvider())
register_provider(MoviesProvider())
register_provider(TVProvider())
register_provider(AnimeProvider())

# Include routers
app.include_router(api_router, prefix="/api")
