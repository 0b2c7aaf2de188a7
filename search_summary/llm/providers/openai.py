"""OpenAI chat completions provider."""

from __future__ import annotations

import logging
from typing import Any

from ..errors import ProviderError
from ..tracing import record_span_error, set_span_output, start_span
from .base import KEY_TEST_TIMEOUT, MODELS_TIMEOUT, SummaryProvider

logger = logging.getLogger(__name__)

API_BASE = "https://api.openai.com/v1"

# Families offered in the live catalog; everything else (embeddings,
# audio, image models) is dropped.
CHAT_MODEL_PREFIXES = (
    "gpt-5",
    "gpt-4.1",
    "gpt-4o",
    "gpt-4-turbo",
    "gpt-4",
    "gpt-3.5-turbo",
)


class OpenAIProvider(SummaryProvider):
    """OpenAI-backed summary provider using /v1/chat/completions."""

    provider_id = "openai"
    provider_name = "OpenAI"
    short_name = "OpenAI"
    default_model = "gpt-4o-mini"
    available_models = (
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-4-turbo",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "gpt-4.1",
        "gpt-4",
        "gpt-3.5-turbo",
        "gpt-5.2",
        "gpt-5.1",
        "gpt-5",
        "gpt-5-mini",
        "gpt-5-nano",
    )

    def fetch_models_from_api(self) -> list[str]:
        if not self.api_key:
            return []
        with start_span(
            "openai.fetch_models",
            kind="http",
            attributes={"llm.provider": self.provider_id},
        ) as span:
            try:
                data = self._request("GET", f"{API_BASE}/models", timeout=MODELS_TIMEOUT)
            except ProviderError as exc:
                record_span_error(span, exc.detail or exc.category.value)
                logger.warning(
                    "OpenAI model list failed (%s): %s",
                    exc.category.value,
                    exc.detail or exc.status_code,
                )
                return []

            models = sorted(
                {
                    model_id
                    for model_id in _model_ids(data)
                    if model_id.startswith(CHAT_MODEL_PREFIXES)
                }
            )
            set_span_output(span, models)
        return models

    def _endpoint(self) -> str:
        return f"{API_BASE}/chat/completions"

    def _build_request_body(self, system_message: str, user_message: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_message},
            ],
        }
        caps = self.capabilities
        if caps.temperature:
            body["temperature"] = 0.2
        if caps.json_mode:
            body["response_format"] = {"type": "json_object"}
        return body

    def _extract_text(self, data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        if isinstance(content, str):
            return content
        # Content-part arrays: [{"type": "text", "text": "..."}]
        if isinstance(content, list):
            chunks = [
                str(part.get("text"))
                for part in content
                if isinstance(part, dict) and part.get("text")
            ]
            return "".join(chunks)
        return ""

    def _probe_api_key(self) -> Any:
        return self._request("GET", f"{API_BASE}/models", timeout=KEY_TEST_TIMEOUT)

    def _key_test_details(self, data: Any) -> dict[str, Any]:
        ids = _model_ids(data)
        chat_models = [
            model_id for model_id in ids if model_id.startswith(("gpt-4", "gpt-3.5", "gpt-5"))
        ]
        return {"model_count": len(ids), "chat_models": len(chat_models)}


def _model_ids(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return []
    items = data.get("data")
    if not isinstance(items, list):
        return []
    ids: list[str] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        model_id = item.get("id")
        if isinstance(model_id, str) and model_id:
            ids.append(model_id)
    return ids
