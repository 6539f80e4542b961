# promptfan/llm/gemini.py
from __future__ import annotations

from typing import List, Optional

import httpx

from ..errors import UpstreamError
from .http import post_json
from .provider import BaseProvider, ProviderConfig, TokenUsage

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiProvider(BaseProvider):
    """Google Gemini over the `generateContent` REST endpoint."""
    name = "Google Gemini"
    available_models = (
        "gemini-3-flash-preview",
        "gemini-3.1-pro-preview",
        "gemini-2.5-flash-lite-latest",
    )
    key_hint = "GEMINI_API_KEY"

    def __init__(self, api_key: str | None = None, models: Optional[List[str]] = None,
                 base_url: str | None = None, timeout: float = 60.0,
                 transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(api_key=api_key, models=models, timeout=timeout)
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._transport = transport

    async def _generate(self, prompt: str, config: ProviderConfig, api_key: str | None):
        url = f"{self.base_url}/v1beta/models/{config.model}:generateContent"
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": config.temperature,
                "maxOutputTokens": config.max_tokens,
            },
        }
        data = await post_json("Gemini", url, body, headers={"x-goog-api-key": api_key or ""},
                               timeout=self.timeout, transport=self._transport)

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason")
            if reason:
                raise UpstreamError(f"Gemini blocked the prompt: {reason}")
            raise UpstreamError("Gemini response did not include candidates")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))

        meta = data.get("usageMetadata")
        usage = None
        if isinstance(meta, dict):
            tokens_in = int(meta.get("promptTokenCount", 0))
            tokens_out = int(meta.get("candidatesTokenCount", 0))
            usage = TokenUsage(
                prompt=tokens_in,
                completion=tokens_out,
                total=int(meta.get("totalTokenCount", tokens_in + tokens_out)),
            )
        return text, usage
