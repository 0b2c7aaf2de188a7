"""Tests for log setup, redaction and the JSONL formatter."""

from __future__ import annotations

import json
import logging

import httpx

from search_summary.config import LoggingConfig
from search_summary.llm.providers.openai import OpenAIProvider
from search_summary.utils.logging import (
    JsonlFormatter,
    log_event,
    redact_secrets,
    redact_text,
    setup_llm_logger,
    setup_logging,
    truncate_text,
)


def test_redact_secrets_masks_keys():
    text = (
        "GET https://generativelanguage.googleapis.com/v1beta/models?key=AIza-secret&alt=json "
        "Authorization: Bearer sk-abcdef123456 raw sk-ant-api03-abcdefghijkl"
    )
    redacted = redact_secrets(text)
    assert "AIza-secret" not in redacted
    assert "sk-abcdef123456" not in redacted
    assert "sk-ant-api03" not in redacted
    assert "key=[REDACTED]&alt=json" in redacted


def test_redact_text_modes():
    text = "See https://x/1 for details"
    assert redact_text(text, "none") == text
    assert redact_text(text, "redact_content") == ""
    assert redact_text(text, "redact_urls") == "See [REDACTED_URL] for details"


def test_truncate_text():
    assert truncate_text("abcdef", 3) == "abc...(truncated)"
    assert truncate_text("abc", 3) == "abc"


def test_jsonl_formatter_includes_extras():
    record = logging.LogRecord("search_summary", logging.INFO, __file__, 1, "hello", None, None)
    record.provider = "openai"
    record.post_count = 2

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["provider"] == "openai"
    assert payload["post_count"] == 2
    assert "lineno" not in payload


def test_setup_logging_writes_file(tmp_path):
    cfg = LoggingConfig(console=False, file=True, filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)

    log_event(logger, "summary done", status="ok")
    for handler in logger.handlers:
        handler.flush()

    line = (tmp_path / "run.jsonl").read_text(encoding="utf-8").strip().splitlines()[-1]
    assert json.loads(line)["status"] == "ok"


def test_llm_logger_requires_log_dir():
    assert setup_llm_logger(LoggingConfig(), None) is None
    assert setup_llm_logger(LoggingConfig(llm_log_enabled=False), None) is None


def test_provider_writes_redacted_llm_log(tmp_path, vendor, winter_posts, winter_payload):
    cfg = LoggingConfig(llm_log_detail="prompt_response")
    llm_logger = setup_llm_logger(cfg, tmp_path)
    fake = vendor(
        httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(winter_payload)}}]})
    )
    provider = OpenAIProvider("sk-test", transport=fake.transport, llm_logger=llm_logger, log_cfg=cfg)

    provider.generate_summary("range", winter_posts)
    for handler in llm_logger.handlers:
        handler.flush()

    entry = json.loads((tmp_path / "llm.jsonl").read_text(encoding="utf-8").strip().splitlines()[-1])
    assert entry["event"] == "llm_generate_summary"
    assert entry["status"] == "ok"
    assert entry["provider"] == "openai"
    assert entry["post_count"] == 1
    assert "https://x/1" not in entry["raw_prompt"]
    assert "[REDACTED_URL]" in entry["raw_prompt"]
