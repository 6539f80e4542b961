# promptfan/llm/ollama.py
from __future__ import annotations

from typing import List, Optional

import httpx

from ..errors import UpstreamError
from .http import post_json
from .provider import BaseProvider, ProviderConfig, TokenUsage

DEFAULT_BASE_URL = "http://localhost:11434"


class OllamaProvider(BaseProvider):
    """Local Ollama daemon; no credential involved."""
    name = "Ollama"
    available_models = ("llama3.2:3b", "qwen2.5:7b", "mistral:7b")
    requires_api_key = False

    def __init__(self, models: Optional[List[str]] = None, base_url: str | None = None,
                 timeout: float = 120.0, num_ctx: int | None = 8192,
                 transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(models=models, timeout=timeout)
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.num_ctx = num_ctx
        self._transport = transport

    async def _generate(self, prompt: str, config: ProviderConfig, api_key: str | None):
        options = {"temperature": config.temperature, "num_predict": config.max_tokens}
        if self.num_ctx:
            options["num_ctx"] = self.num_ctx
        body = {
            "model": config.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        data = await post_json("Ollama", f"{self.base_url}/api/generate", body,
                               timeout=self.timeout, transport=self._transport)
        text = data.get("response")
        if not isinstance(text, str):
            raise UpstreamError("Ollama response missing response text")

        # Counts are only present once the model actually ran.
        tokens_in = data.get("prompt_eval_count")
        tokens_out = data.get("eval_count")
        usage = None
        if isinstance(tokens_in, int) and isinstance(tokens_out, int):
            usage = TokenUsage(prompt=tokens_in, completion=tokens_out, total=tokens_in + tokens_out)
        return text, usage
