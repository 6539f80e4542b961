import asyncio

import pytest

from promptfan import config as config_mod
from promptfan.config import Config
from promptfan.llm import BaseProvider, TokenUsage
from promptfan.observability import configure_logging

# Keep test output clean; loggers cache their config on first use.
configure_logging("CRITICAL")


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    for env in ("GEMINI_API_KEY", "GROQ_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(env, raising=False)
    monkeypatch.chdir(tmp_path)  # no stray .env
    monkeypatch.setattr(config_mod, "DEFAULT_CONFIG_PATH", tmp_path / "config.yaml")
    config_mod.reset_config()
    yield
    config_mod.reset_config()


class FakeProvider(BaseProvider):
    """Scripted adapter: sleeps, then returns text or raises."""

    def __init__(self, name, text="ok", delay=0.0, exc=None, api_key="k", usage=None,
                 models=("m1", "m2")):
        super().__init__(api_key=api_key, models=list(models))
        self.name = name
        self.text = text
        self.delay = delay
        self.exc = exc
        self.usage = usage
        self.calls = []

    async def _generate(self, prompt, config, api_key):
        self.calls.append((prompt, config, api_key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.text, self.usage


@pytest.fixture
def usage():
    return TokenUsage(prompt=3, completion=4, total=7)


@pytest.fixture
def default_cfg():
    return Config()
