"""Google Gemini generateContent provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import ErrorCategory, ProviderError
from ..tracing import record_span_error, set_span_output, start_span
from .base import KEY_TEST_TIMEOUT, MODELS_TIMEOUT, SummaryProvider

logger = logging.getLogger(__name__)

API_BASE = "https://generativelanguage.googleapis.com/v1beta"

# Google reports a bad key as 400 INVALID_ARGUMENT ("API key not valid")
# or 403 PERMISSION_DENIED rather than 401.
_KEY_ERROR_STATUSES = frozenset({400, 403})


class GeminiProvider(SummaryProvider):
    """Gemini-backed summary provider.

    Gemini takes the key as a query parameter and has no separate system
    role in this request shape, so the system and user messages are sent
    as one prompt.
    """

    provider_id = "gemini"
    provider_name = "Google Gemini"
    short_name = "Gemini"
    default_model = "gemini-1.5-flash"
    available_models = (
        "gemini-2.0-flash-exp",
        "gemini-1.5-flash",
        "gemini-1.5-flash-8b",
        "gemini-1.5-pro",
        "gemini-pro",
    )

    def fetch_models_from_api(self) -> list[str]:
        if not self.api_key:
            return []
        with start_span(
            "gemini.fetch_models",
            kind="http",
            attributes={"llm.provider": self.provider_id},
        ) as span:
            try:
                data = self._request(
                    "GET",
                    f"{API_BASE}/models",
                    params=self._query_params(),
                    timeout=MODELS_TIMEOUT,
                )
            except ProviderError as exc:
                record_span_error(span, exc.detail or exc.category.value)
                if exc.category == ErrorCategory.DECODE:
                    return self.get_available_models()
                logger.warning(
                    "Gemini model list failed (%s): %s",
                    exc.category.value,
                    exc.detail or exc.status_code,
                )
                return []
            models = _gemini_model_names(data)
            set_span_output(span, models)
        # An empty or malformed catalog falls back to the curated list
        return models or self.get_available_models()

    def _endpoint(self) -> str:
        return f"{API_BASE}/models/{self.model}:generateContent"

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _query_params(self) -> dict[str, str] | None:
        return {"key": self.api_key}

    def _build_request_body(self, system_message: str, user_message: str) -> dict[str, Any]:
        generation_config: dict[str, Any] = {
            "topK": 40,
            "topP": 0.95,
            "maxOutputTokens": 2048,
        }
        caps = self.capabilities
        if caps.temperature:
            generation_config["temperature"] = 0.2
        if caps.json_mode:
            generation_config["responseMimeType"] = "application/json"
        return {
            "contents": [{"parts": [{"text": f"{system_message}\n\n{user_message}"}]}],
            "generationConfig": generation_config,
        }

    def _extract_text(self, data: Any) -> str:
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return ""

        if not isinstance(parts, list):
            return ""

        non_thought_chunks: list[str] = []
        all_chunks: list[str] = []
        for part in parts:
            if not isinstance(part, dict):
                continue
            text = part.get("text")
            if text is None:
                continue
            chunk = str(text)
            if not chunk:
                continue
            all_chunks.append(chunk)
            if not bool(part.get("thought")):
                non_thought_chunks.append(chunk)

        if non_thought_chunks:
            return "".join(non_thought_chunks)
        return "".join(all_chunks)

    def _classify_response(self, response: httpx.Response, detail: str | None) -> ErrorCategory:
        if response.status_code in _KEY_ERROR_STATUSES and detail and "API key" in detail:
            return ErrorCategory.INVALID_KEY
        return super()._classify_response(response, detail)

    def _probe_api_key(self) -> Any:
        return self._request(
            "GET",
            f"{API_BASE}/models",
            params=self._query_params(),
            timeout=KEY_TEST_TIMEOUT,
        )

    def _key_test_details(self, data: Any) -> dict[str, Any]:
        items = data.get("models") if isinstance(data, dict) else None
        return {"model_count": len(items) if isinstance(items, list) else 0}


def _gemini_model_names(data: Any) -> list[str]:
    items = data.get("models") if isinstance(data, dict) else None
    if not isinstance(items, list):
        return []

    models: set[str] = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        if not isinstance(name, str) or not name:
            continue
        name = name.removeprefix("models/")
        if name.startswith("gemini"):
            models.add(name)
    return sorted(models)
