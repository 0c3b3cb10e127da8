# -*- coding: utf-8 -*-
"""
FitSync API

HTTP surface over the nutrition sync engine: food log, profile sync and a
WebSocket event stream.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .engine import NutritionEngine
from .foodlog.api import foods_router
from .foodlog.api import router as foodlog_router
from .profile.api import router as profile_router
from .realtime import websocket_endpoint


def create_app(engine: Optional[NutritionEngine] = None) -> FastAPI:
    engine = engine or NutritionEngine.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.engine.initialize()
        yield

    app = FastAPI(
        title="FitSync",
        description="Food log, protein recommendation and profile synchronization",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health():
        return {"status": "ok", "sync_state": app.state.engine.coordinator.state.value}

    app.include_router(foodlog_router)
    app.include_router(foods_router)
    app.include_router(profile_router)
    app.add_api_websocket_route("/ws/events", websocket_endpoint)
    return app


app = create_app()


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("FITSYNC_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("FITSYNC_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("fitsync.api:app", host=host, port=port, reload=False)
