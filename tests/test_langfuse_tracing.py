"""Tests for Langfuse tracing setup behavior."""

from __future__ import annotations

from contextlib import contextmanager
import json
import sys
import types

import httpx
import pytest

from search_summary.config import LangfuseConfig
from search_summary.llm import tracing
from search_summary.llm.providers.openai import OpenAIProvider


class DummySpan:
    def __init__(self):
        self.updates: list[dict] = []

    def update(self, **kwargs):
        self.updates.append(kwargs)


class DummyLangfuse:
    instances: list["DummyLangfuse"] = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.spans: list[tuple[str, dict, DummySpan]] = []
        self.flushed = False
        DummyLangfuse.instances.append(self)

    @contextmanager
    def start_as_current_span(self, **kwargs):
        span = DummySpan()
        self.spans.append((kwargs["name"], kwargs, span))
        yield span

    def flush(self):
        self.flushed = True


@pytest.fixture
def fake_langfuse(monkeypatch):
    DummyLangfuse.instances = []
    monkeypatch.setitem(sys.modules, "langfuse", types.SimpleNamespace(Langfuse=DummyLangfuse))
    monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
    monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk-lf-test")
    yield DummyLangfuse
    tracing.setup_langfuse(LangfuseConfig())


def test_setup_langfuse_reads_env_credentials(fake_langfuse, monkeypatch):
    monkeypatch.setenv("LANGFUSE_HOST", "https://us.cloud.langfuse.com")

    tracing.setup_langfuse(LangfuseConfig(enabled=True, environment="staging"))

    client = tracing.get_tracer()
    assert isinstance(client, fake_langfuse)
    assert client.kwargs["public_key"] == "pk-test"
    assert client.kwargs["secret_key"] == "sk-lf-test"
    assert client.kwargs["host"] == "https://us.cloud.langfuse.com"
    assert client.kwargs["environment"] == "staging"


def test_setup_langfuse_disabled_by_default(fake_langfuse):
    tracing.setup_langfuse(LangfuseConfig())
    assert tracing.get_tracer() is None
    assert fake_langfuse.instances == []


def test_setup_langfuse_disables_tracer_when_keys_missing(monkeypatch):
    monkeypatch.delenv("LANGFUSE_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("LANGFUSE_SECRET_KEY", raising=False)

    tracing.setup_langfuse(LangfuseConfig(enabled=True))

    assert tracing.get_tracer() is None


def test_start_span_is_noop_without_tracer():
    tracing.setup_langfuse(LangfuseConfig())
    with tracing.start_span("noop", kind="llm") as span:
        assert span is None
    tracing.set_span_output(span, "ignored")
    tracing.record_span_error(span, "ignored")
    tracing.flush()


def test_summary_call_is_traced(fake_langfuse, vendor, winter_posts, winter_payload):
    tracing.setup_langfuse(LangfuseConfig(enabled=True, redaction="none"))
    fake = vendor(
        httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(winter_payload)}}]})
    )
    provider = OpenAIProvider("sk-test", transport=fake.transport)

    provider.generate_summary("range", winter_posts)
    tracing.flush()

    client = tracing.get_tracer()
    name, kwargs, span = client.spans[-1]
    assert name == "openai.generate_summary"
    assert kwargs["metadata"]["llm.provider"] == "openai"
    assert kwargs["metadata"]["llm.model"] == "gpt-4o-mini"
    assert kwargs["metadata"]["search.post_count"] == 1
    assert kwargs["metadata"]["span.kind"] == "llm"
    assert "User search query: range" in kwargs["input"]
    assert span.updates[-1]["output"] == json.dumps(winter_payload)
    assert client.flushed


def test_failed_call_marks_span_error(fake_langfuse, vendor, winter_posts):
    tracing.setup_langfuse(LangfuseConfig(enabled=True))
    fake = vendor(httpx.Response(429, json={"error": {"message": "Rate limit reached"}}))
    provider = OpenAIProvider("sk-test", transport=fake.transport)

    provider.generate_summary("range", winter_posts)

    _, _, span = tracing.get_tracer().spans[-1]
    assert span.updates[-1] == {
        "level": "ERROR",
        "status_message": "OpenAI rate limit exceeded. Please try again in a few moments.",
    }
