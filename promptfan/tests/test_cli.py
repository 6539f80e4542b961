import json

from typer.testing import CliRunner

from promptfan import cli
from promptfan import config as config_mod
from promptfan.aggregator import Aggregator
from promptfan.config import Config, ProviderSettings
from promptfan.errors import UpstreamError
from promptfan.llm import GroqProvider

from conftest import FakeProvider

runner = CliRunner()


def _use(monkeypatch, *providers):
    agg = Aggregator(providers)
    monkeypatch.setattr(cli, "build_aggregator", lambda: agg)
    return agg


def _gemini(**kw):
    p = FakeProvider("Google Gemini", models=("gemini-3-flash-preview", "gemini-3.1-pro-preview"), **kw)
    return p


def _groq(**kw):
    return FakeProvider("Groq", models=GroqProvider.available_models, **kw)


def test_providers_table(monkeypatch):
    _use(monkeypatch, _gemini(), _groq(api_key=None))
    result = runner.invoke(cli.app, ["providers"])
    assert result.exit_code == 0
    assert "Google Gemini" in result.output
    assert "llama-3.1-8b-instant" in result.output


def test_ask_renders_cards_and_skipped(monkeypatch):
    _use(monkeypatch, _gemini(text="gemini says hi"), _groq(exc=UpstreamError("Groq error 500: boom")))
    result = runner.invoke(cli.app, ["ask", "hello"])
    assert result.exit_code == 0
    assert "gemini says hi" in result.output
    assert "Groq error 500: boom" in result.output


def test_ask_only_and_model_override_json(monkeypatch):
    gem, groq = _gemini(), _groq()
    _use(monkeypatch, gem, groq)
    result = runner.invoke(cli.app, ["ask", "hello", "--only", "gemini", "--model",
                                     "gemini=gemini-3.1-pro-preview", "--max-tokens", "64", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [r["model"] for r in data["responses"]] == ["gemini-3.1-pro-preview"]
    assert data["skipped"] == ["Groq"]
    assert gem.calls[0][1].max_tokens == 64
    assert groq.calls == []


def test_ask_rejects_unadvertised_model(monkeypatch):
    _use(monkeypatch, _gemini(), _groq())
    result = runner.invoke(cli.app, ["ask", "hello", "--model", "groq=gpt-4"])
    assert result.exit_code == 2


def test_ask_exits_nonzero_when_everything_failed(monkeypatch):
    _use(monkeypatch, _gemini(api_key=None), _groq(api_key=None))
    result = runner.invoke(cli.app, ["ask", "hello"])
    assert result.exit_code == 1
    assert "API key is missing" in result.output


def test_ask_skips_provider_with_bad_default_model(monkeypatch):
    monkeypatch.setattr(config_mod, "_config", Config(groq=ProviderSettings(model="gpt-4")))
    gem, groq = _gemini(), _groq()
    _use(monkeypatch, gem, groq)
    result = runner.invoke(cli.app, ["ask", "hello", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [r["provider_name"] for r in data["responses"]] == ["Google Gemini"]
    assert data["skipped"] == ["Groq"]
    assert groq.calls == []


def test_ask_model_flag_repairs_bad_default(monkeypatch):
    monkeypatch.setattr(config_mod, "_config", Config(groq=ProviderSettings(model="gpt-4")))
    groq = _groq()
    _use(monkeypatch, _gemini(), groq)
    result = runner.invoke(cli.app, ["ask", "hello", "--model", "groq=llama-3.1-70b-versatile", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["skipped"] == []
    assert groq.calls[0][1].model == "llama-3.1-70b-versatile"
