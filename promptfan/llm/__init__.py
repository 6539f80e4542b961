# promptfan/llm/__init__.py
from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from ..config import Config, ProviderSettings
from ..observability import get_logger
from .provider import (
    BaseProvider,
    LLMProvider,
    ProviderConfig,
    ProviderResponse,
    TokenUsage,
    describe,
)
from .gemini import GeminiProvider
from .groq import GroqProvider
from .anthropic import AnthropicProvider
from .ollama import OllamaProvider

logger = get_logger(__name__)

# Registry order is result order.
PROVIDER_CLASSES = {
    "gemini": GeminiProvider,
    "groq": GroqProvider,
    "anthropic": AnthropicProvider,
    "ollama": OllamaProvider,
}


def build_provider(section: str, ps: ProviderSettings, api_key: str | None = None) -> BaseProvider:
    models = ps.models or None
    if section == "ollama":
        return OllamaProvider(models=models, base_url=ps.base_url, timeout=ps.timeout,
                              num_ctx=getattr(ps, "num_ctx", None))
    cls = PROVIDER_CLASSES[section]
    return cls(api_key=api_key or ps.api_key, models=models, base_url=ps.base_url, timeout=ps.timeout)


def build_providers(cfg: Config) -> List[BaseProvider]:
    return [build_provider(name, ps, cfg.resolved_api_key(name))
            for name, ps in cfg.sections().items() if ps.enabled]


def default_configs(cfg: Config, providers: Optional[List[LLMProvider]] = None,
                    models: Optional[Mapping[str, str]] = None) -> Dict[str, ProviderConfig]:
    """One `ProviderConfig` per enabled provider, from its section defaults.

    `models` overrides the default model per provider name. A provider whose
    model is not one it advertises is left out and logged as misconfigured.
    """
    by_section = {name: ps for name, ps in cfg.sections().items() if ps.enabled}
    if providers is None:
        providers = [build_provider(name, ps) for name, ps in by_section.items()]
    sections = {PROVIDER_CLASSES[name].name: ps for name, ps in by_section.items()}
    models = models or {}
    out: Dict[str, ProviderConfig] = {}
    for p in providers:
        ps = sections.get(p.name)
        if ps is None or not p.available_models:
            continue
        model = models.get(p.name) or ps.model or p.available_models[0]
        if model not in p.available_models:
            logger.warning("provider_misconfigured", provider=p.name, model=model,
                           available=list(p.available_models))
            continue
        out[p.name] = ProviderConfig(
            model=model,
            temperature=ps.temperature,
            max_tokens=ps.max_tokens,
        )
    return out


__all__ = [
    "LLMProvider",
    "BaseProvider",
    "ProviderConfig",
    "ProviderResponse",
    "TokenUsage",
    "describe",
    "GeminiProvider",
    "GroqProvider",
    "AnthropicProvider",
    "OllamaProvider",
    "PROVIDER_CLASSES",
    "build_provider",
    "build_providers",
    "default_configs",
]
