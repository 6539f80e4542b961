# promptfan/api/routers/providers.py
from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("")
def list_providers(request: Request):
    return request.app.state.aggregator.describe()
