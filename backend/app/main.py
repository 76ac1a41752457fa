"""FastAPI entry point for the dynasty contract valuation backend."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import league_config
from .routers import export, league, stats, valuations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from .services.league_store import get_store
    store = get_store()
    logger.info(
        f"{league_config.league_name}: season {league_config.current_season}, "
        f"{len(store.players)} players, {len(store.contracts)} contracts loaded"
    )
    yield


app = FastAPI(
    title="Dynasty Contract Valuation",
    description=f"{league_config.league_name} - salary-cap contract estimates and ratings",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8081", "http://localhost:19006"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(league.router, prefix="/api/league", tags=["league"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
app.include_router(valuations.router, prefix="/api/valuations", tags=["valuations"])
app.include_router(export.router, prefix="/api/export", tags=["export"])


@app.get("/api/health")
def health():
    return {"status": "ok"}
