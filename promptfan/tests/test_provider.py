import asyncio

import pytest

from promptfan.errors import UpstreamError
from promptfan.llm import LLMProvider, ProviderConfig, ProviderResponse, TokenUsage, describe
from promptfan.llm.provider import NO_CONTENT

from conftest import FakeProvider


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        ProviderConfig(model="m1", max_tokens=0)
    with pytest.raises(ValueError):
        ProviderConfig(model="m1", temperature=-0.1)


def test_config_hides_api_key_in_repr():
    cfg = ProviderConfig(model="m1", api_key="sk-secret")
    assert "sk-secret" not in repr(cfg)


def test_response_is_immutable():
    r = ProviderResponse(provider_name="A", model="m1", content="hi")
    with pytest.raises(Exception):
        r.content = "changed"  # type: ignore[misc]
    assert r.ok


def test_success_carries_usage_and_latency(usage):
    p = FakeProvider("A", text="hello back", usage=usage)
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1")))
    assert r.provider_name == "A"
    assert r.model == "m1"
    assert r.content == "hello back"
    assert r.error is None
    assert r.tokens_used == TokenUsage(prompt=3, completion=4, total=7)
    assert isinstance(r.latency, int) and r.latency >= 0


def test_empty_text_falls_back_to_placeholder():
    p = FakeProvider("A", text="")
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1")))
    assert r.content == NO_CONTENT
    assert r.error is None


def test_missing_credential_skips_vendor_call():
    p = FakeProvider("A", api_key=None)
    p.key_hint = "A_API_KEY"
    assert not p.has_api_key
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1")))
    assert r.content == ""
    assert "API key is missing" in r.error
    assert "A_API_KEY" in r.error
    assert r.latency is None
    assert p.calls == []


def test_per_call_key_overrides_process_key():
    p = FakeProvider("A", api_key="process")
    asyncio.run(p.complete("hello", ProviderConfig(model="m1", api_key="per-call")))
    asyncio.run(p.complete("hello", ProviderConfig(model="m1")))
    assert [c[2] for c in p.calls] == ["per-call", "process"]


def test_per_call_key_satisfies_missing_process_key():
    p = FakeProvider("A", api_key=None)
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1", api_key="per-call")))
    assert r.ok


def test_upstream_error_becomes_data():
    p = FakeProvider("A", exc=UpstreamError("A error 503: overloaded", status_code=503))
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1")))
    assert r.content == ""
    assert r.error == "A error 503: overloaded"
    assert r.latency is not None


def test_unexpected_exception_becomes_data():
    p = FakeProvider("A", exc=KeyError("choices"))
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1")))
    assert r.content == ""
    assert r.error.startswith("KeyError")


def test_describe_and_protocol():
    p = FakeProvider("A", models=("x", "y"))
    assert isinstance(p, LLMProvider)
    assert describe(p) == {"name": "A", "available_models": ["x", "y"], "has_api_key": True}


def test_to_dict_nests_usage(usage):
    r = ProviderResponse(provider_name="A", model="m1", content="hi", latency=5, tokens_used=usage)
    d = r.to_dict()
    assert d["tokens_used"] == {"prompt": 3, "completion": 4, "total": 7}
    assert d["error"] is None


def test_blank_key_counts_as_missing():
    p = FakeProvider("A", api_key="  ")
    assert not p.has_api_key
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1", api_key=" ")))
    assert "API key is missing" in r.error
    assert p.calls == []


def test_blank_per_call_key_falls_back_to_process_key():
    p = FakeProvider("A", api_key="process")
    r = asyncio.run(p.complete("hello", ProviderConfig(model="m1", api_key="   ")))
    assert r.ok
    assert p.calls[0][2] == "process"
