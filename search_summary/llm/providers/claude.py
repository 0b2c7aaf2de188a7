"""Anthropic Claude messages provider."""

from __future__ import annotations

from typing import Any

import httpx

from ..errors import ErrorCategory
from .base import KEY_TEST_TIMEOUT, SummaryProvider

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"

# Anthropic answers 529 when its fleet is overloaded.
OVERLOADED_STATUS = 529


class ClaudeProvider(SummaryProvider):
    """Claude-backed summary provider using /v1/messages.

    Anthropic has no public model listing for this integration, so the
    curated list doubles as the live catalog.
    """

    provider_id = "claude"
    provider_name = "Anthropic Claude"
    short_name = "Claude"
    default_model = "claude-3-5-haiku-20241022"
    available_models = (
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229",
        "claude-3-sonnet-20240229",
        "claude-3-haiku-20240307",
    )

    max_tokens = 4096

    def fetch_models_from_api(self) -> list[str]:
        return self.get_available_models()

    def _endpoint(self) -> str:
        return API_URL

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
            "Content-Type": "application/json",
        }

    def _build_request_body(self, system_message: str, user_message: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_message,
            "messages": [{"role": "user", "content": user_message}],
        }
        if self.capabilities.temperature:
            body["temperature"] = 0.2
        return body

    def _extract_text(self, data: Any) -> str:
        if not isinstance(data, dict):
            return ""
        blocks = data.get("content")
        if not isinstance(blocks, list):
            return ""
        chunks: list[str] = []
        for block in blocks:
            if not isinstance(block, dict):
                continue
            if block.get("type", "text") != "text":
                continue
            text = block.get("text")
            if text:
                chunks.append(str(text))
        return "".join(chunks)

    def _classify_response(self, response: httpx.Response, detail: str | None) -> ErrorCategory:
        if response.status_code == OVERLOADED_STATUS:
            return ErrorCategory.UNAVAILABLE
        return super()._classify_response(response, detail)

    def _probe_api_key(self) -> Any:
        body = {
            "model": self.model,
            "max_tokens": 10,
            "messages": [{"role": "user", "content": "Hello"}],
        }
        return self._request("POST", API_URL, payload=body, timeout=KEY_TEST_TIMEOUT)
