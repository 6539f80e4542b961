# promptfan/api/main.py
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..aggregator import Aggregator
from ..config import get_config
from ..llm import build_providers
from ..observability import configure_logging
from .routers import complete as complete_router
from .routers import providers as providers_router


def create_app(aggregator: Optional[Aggregator] = None) -> FastAPI:
    if aggregator is None:
        cfg = get_config()
        configure_logging(cfg.log_level, json=cfg.log_json)
        aggregator = Aggregator(build_providers(cfg))

    app = FastAPI(title="promptfan API", version="0.1.0")
    app.state.aggregator = aggregator

    # CORS for a local front end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost", "http://127.0.0.1", "http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(providers_router.router, prefix="/providers", tags=["providers"])
    app.include_router(complete_router.router, prefix="/complete", tags=["complete"])
    return app
