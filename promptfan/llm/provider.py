# promptfan/llm/provider.py
from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..errors import MissingCredentialError, ProviderError
from ..observability import get_logger

logger = get_logger(__name__)

NO_CONTENT = "No response content"


@dataclass(frozen=True)
class ProviderConfig:
    """Per-call parameters for one backend."""
    model: str
    temperature: float = 0.7
    max_tokens: int = 1024
    api_key: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.temperature < 0:
            raise ValueError(f"temperature must be non-negative, got {self.temperature}")


@dataclass(frozen=True)
class TokenUsage:
    prompt: int
    completion: int
    total: int


@dataclass(frozen=True)
class ProviderResponse:
    provider_name: str
    model: str
    content: str = ""
    error: Optional[str] = None
    latency: Optional[int] = None  # ms
    tokens_used: Optional[TokenUsage] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@runtime_checkable
class LLMProvider(Protocol):
    name: str
    available_models: Sequence[str]

    @property
    def has_api_key(self) -> bool: ...

    async def complete(self, prompt: str, config: ProviderConfig) -> ProviderResponse: ...


def describe(provider: LLMProvider) -> Dict[str, Any]:
    """Capability descriptor used by configuration surfaces."""
    return {
        "name": provider.name,
        "available_models": list(provider.available_models),
        "has_api_key": bool(provider.has_api_key),
    }


class BaseProvider:
    """Shared skeleton for adapters.

    Subclasses implement `_generate`, which performs exactly one vendor call
    and returns `(text, usage)`. `complete` owns everything around it: the
    credential check, latency measurement, and turning any failure into a
    response with an `error` instead of an exception.
    """
    name: str = ""
    available_models: Tuple[str, ...] = ()
    requires_api_key: bool = True
    key_hint: str = ""

    def __init__(self, api_key: str | None = None, models: Optional[List[str]] = None,
                 timeout: float = 60.0):
        self._api_key = api_key if api_key and api_key.strip() else None
        if models:
            self.available_models = tuple(models)
        self.timeout = timeout

    @property
    def has_api_key(self) -> bool:
        if not self.requires_api_key:
            return True
        return self._api_key is not None

    def resolve_api_key(self, config: ProviderConfig) -> str | None:
        # A key supplied with the call wins over the process-level one.
        if config.api_key and config.api_key.strip():
            return config.api_key
        return self._api_key

    async def _generate(self, prompt: str, config: ProviderConfig,
                        api_key: str | None) -> Tuple[Optional[str], Optional[TokenUsage]]:
        raise NotImplementedError

    async def complete(self, prompt: str, config: ProviderConfig) -> ProviderResponse:
        api_key = self.resolve_api_key(config)
        if self.requires_api_key and not (api_key or "").strip():
            hint = f" (set {self.key_hint} or pass api_key)" if self.key_hint else ""
            err = MissingCredentialError(f"{self.name} API key is missing{hint}")
            logger.warning("provider_call_failed", provider=self.name, model=config.model,
                           kind="missing_credential")
            return self.error_response(config.model, err)

        t0 = time.perf_counter()
        try:
            text, usage = await self._generate(prompt, config, api_key)
        except Exception as e:
            latency = _elapsed_ms(t0)
            logger.warning("provider_call_failed", provider=self.name, model=config.model,
                           kind=type(e).__name__, latency_ms=latency)
            return self.error_response(config.model, e, latency=latency)
        latency = _elapsed_ms(t0)
        logger.info("provider_call_succeeded", provider=self.name, model=config.model,
                    latency_ms=latency, total_tokens=usage.total if usage else None)
        return ProviderResponse(
            provider_name=self.name,
            model=config.model,
            content=text or NO_CONTENT,
            latency=latency,
            tokens_used=usage,
        )

    def error_response(self, model: str, error: BaseException,
                       latency: int | None = None) -> ProviderResponse:
        message = str(error)
        if not message or not isinstance(error, ProviderError):
            message = f"{type(error).__name__}: {message}" if message else type(error).__name__
        return ProviderResponse(
            provider_name=self.name,
            model=model,
            content="",
            error=message,
            latency=latency,
        )


def _elapsed_ms(t0: float) -> int:
    return max(0, int((time.perf_counter() - t0) * 1000))
