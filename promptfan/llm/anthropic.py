# promptfan/llm/anthropic.py
from __future__ import annotations

from typing import Any, List, Optional

import anthropic

from ..errors import UpstreamError, UpstreamTimeoutError
from .provider import BaseProvider, ProviderConfig, TokenUsage


class AnthropicProvider(BaseProvider):
    """Thin wrapper over the `anthropic` async SDK."""
    name = "Anthropic"
    available_models = (
        "claude-3-5-sonnet-20240620",
        "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229",
    )
    key_hint = "ANTHROPIC_API_KEY"

    def __init__(self, api_key: str | None = None, models: Optional[List[str]] = None,
                 base_url: str | None = None, timeout: float = 60.0,
                 http_client: anthropic.DefaultAsyncHttpxClient | None = None):
        super().__init__(api_key=api_key, models=models, timeout=timeout)
        self.base_url = base_url
        self._http_client = http_client

    def _client(self, api_key: str | None) -> anthropic.AsyncAnthropic:
        # Built per call so a per-call key never leaks into another call.
        return anthropic.AsyncAnthropic(
            api_key=api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
            http_client=self._http_client,
        )

    async def _generate(self, prompt: str, config: ProviderConfig, api_key: str | None):
        client = self._client(api_key)
        try:
            msg = await client.messages.create(
                model=config.model,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APITimeoutError as e:
            raise UpstreamTimeoutError(f"Anthropic request timed out after {self.timeout:g}s") from e
        except anthropic.APIStatusError as e:
            raise UpstreamError(f"Anthropic error {e.status_code}: {_status_message(e)}",
                                status_code=e.status_code) from e
        except anthropic.APIConnectionError as e:
            raise UpstreamError(f"Anthropic request failed: {e}") from e
        finally:
            if self._http_client is None:
                await client.close()

        text = "".join(block.text for block in msg.content if getattr(block, "type", None) == "text")
        usage = None
        if msg.usage is not None:
            tokens_in = msg.usage.input_tokens
            tokens_out = msg.usage.output_tokens
            # The API reports input/output only.
            usage = TokenUsage(prompt=tokens_in, completion=tokens_out, total=tokens_in + tokens_out)
        return text, usage


def _status_message(e: anthropic.APIStatusError) -> str:
    body: Any = e.body
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return e.message
