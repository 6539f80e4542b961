# promptfan/aggregator.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .llm.provider import LLMProvider, ProviderConfig, ProviderResponse, describe
from .observability import get_logger

logger = get_logger(__name__)


class Aggregator:
    """Fans one prompt out to every configured provider.

    The registry is fixed at construction and its order is the order of the
    results. Each `run_all` is independent; nothing is carried between calls.
    """
    def __init__(self, providers: Iterable[LLMProvider]):
        self._providers: Tuple[LLMProvider, ...] = tuple(providers)
        names = [p.name for p in self._providers]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Duplicate provider names: {', '.join(dupes)}")

    def get_providers(self) -> Tuple[LLMProvider, ...]:
        return self._providers

    def describe(self) -> List[Dict[str, Any]]:
        return [describe(p) for p in self._providers]

    def get(self, name: str) -> LLMProvider | None:
        for p in self._providers:
            if p.name == name:
                return p
        return None

    def skipped(self, configs: Mapping[str, ProviderConfig]) -> List[str]:
        """Registered providers that `run_all` would leave out for these configs."""
        return [p.name for p in self._providers if configs.get(p.name) is None]

    async def run_all(self, prompt: str, configs: Mapping[str, ProviderConfig]) -> List[ProviderResponse]:
        selected = []
        for p in self._providers:
            config = configs.get(p.name)
            if config is None:
                logger.info("provider_skipped", provider=p.name, reason="unconfigured")
                continue
            selected.append((p, config))

        logger.info("fanout_started", providers=[p.name for p, _ in selected])
        # Adapters resolve to error responses themselves; anything raised here
        # is a broken adapter and aborts the round.
        results = await asyncio.gather(*(p.complete(prompt, c) for p, c in selected))
        logger.info("fanout_finished", total=len(results),
                    failed=sum(1 for r in results if r.error is not None))
        return list(results)
