# promptfan/api/routers/complete.py
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from ...config import get_config
from ...llm import ProviderConfig, default_configs

router = APIRouter()


class ProviderConfigBody(BaseModel):
    model: str
    temperature: float = Field(0.7, ge=0.0)
    max_tokens: int = Field(1024, ge=1)
    api_key: Optional[str] = None


class CompleteBody(BaseModel):
    prompt: str = Field(..., min_length=1)
    configs: Optional[Dict[str, ProviderConfigBody]] = None


@router.post("")
async def complete(body: CompleteBody, request: Request):
    agg = request.app.state.aggregator
    if body.configs is None:
        configs = default_configs(get_config(), list(agg.get_providers()))
    else:
        configs = {}
        for name, c in body.configs.items():
            provider = agg.get(name)
            if provider is None:
                raise HTTPException(status_code=422, detail=f"Unknown provider: {name}")
            if c.model not in provider.available_models:
                raise HTTPException(status_code=422, detail=f"{name} does not offer model {c.model}")
            configs[name] = ProviderConfig(**c.model_dump())

    responses = await agg.run_all(body.prompt, configs)
    return {
        "responses": [r.to_dict() for r in responses],
        "skipped": agg.skipped(configs),
    }
