# promptfan/llm/groq.py
from __future__ import annotations

from typing import List, Optional

import httpx

from ..errors import UpstreamError
from .http import post_json
from .provider import BaseProvider, ProviderConfig, TokenUsage

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"


class GroqProvider(BaseProvider):
    """Groq's OpenAI-compatible chat completions endpoint."""
    name = "Groq"
    available_models = (
        "llama-3.1-8b-instant",
        "llama-3.1-70b-versatile",
        "mixtral-8x7b-instruct",
    )
    key_hint = "GROQ_API_KEY"

    def __init__(self, api_key: str | None = None, models: Optional[List[str]] = None,
                 base_url: str | None = None, timeout: float = 60.0,
                 transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(api_key=api_key, models=models, timeout=timeout)
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._transport = transport

    async def _generate(self, prompt: str, config: ProviderConfig, api_key: str | None):
        body = {
            "model": config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        headers = {"Authorization": f"Bearer {api_key}"}
        data = await post_json("Groq", f"{self.base_url}/chat/completions", body,
                               headers=headers, timeout=self.timeout, transport=self._transport)

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise UpstreamError("Groq response did not include choices")
        text = (choices[0].get("message") or {}).get("content") or ""

        u = data.get("usage")
        usage = None
        if isinstance(u, dict) and "total_tokens" in u:
            usage = TokenUsage(
                prompt=int(u.get("prompt_tokens", 0)),
                completion=int(u.get("completion_tokens", 0)),
                total=int(u["total_tokens"]),
            )
        return text, usage
