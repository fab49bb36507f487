from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.structured_logging import RequestCorrelationMiddleware, configure_structured_logging
from core.ttl_cache import TTLCache
from env_config import Config
from routers import sports_router
from services import BettingApiClient, PrizePicksClient, TheOddsClient, UnifiedDataService

configure_structured_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Config.log_status()
    Config.validate_required()

    http = httpx.AsyncClient(timeout=10.0)
    cache = TTLCache(default_ttl=Config.CACHE_TTL_SECONDS, max_entries=Config.CACHE_MAX_ENTRIES)
    app.state.data_service = UnifiedDataService(
        BettingApiClient(http),
        PrizePicksClient(http),
        cache=cache,
        cache_ttl=Config.CACHE_TTL_SECONDS,
    )
    app.state.odds_client = TheOddsClient(http)
    logger.info("Unified data service ready")
    try:
        yield
    finally:
        await http.aclose()


app = FastAPI(title="Unified Sports Data API", version=Config.API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestCorrelationMiddleware)

app.include_router(sports_router)


@app.get("/")
def root():
    return {
        "status": "online",
        "message": "Unified Sports Data API",
        "version": Config.API_VERSION,
    }


@app.get("/health")
def health():
    return {
        "status": "healthy",
        "service": Config.SERVICE_NAME,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
