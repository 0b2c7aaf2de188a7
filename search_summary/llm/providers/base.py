"""Provider contract shared by every AI vendor adapter.

``SummaryProvider`` owns the parts of a summary request that do not depend
on the vendor: the API key guard, prompt rendering, the HTTP call and its
error translation, model-output parsing, logging and tracing. Adapters
fill in the endpoint, authentication, request body and response envelope.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any, ClassVar, Mapping, Sequence

import httpx

from ...config import LoggingConfig
from ...core.types import KeyTestResult, PostContext, SummaryRequest, SummaryResult
from ...utils.logging import log_event, redact_secrets, redact_text, truncate_text
from ..errors import (
    ErrorCategory,
    ProviderError,
    classify_status,
    classify_transport_error,
    extract_error_message,
    key_test_message,
    summary_error_message,
)
from ..parsing import MAX_RESULTS, ModelOutputError, normalize_summary, parse_model_json
from ..prompts import build_system_prompt, build_user_message
from ..tracing import record_span_error, set_span_output, start_span
from .capabilities import (
    ModelCapabilities,
    family_table,
    lookup_capabilities,
    matches_family,
    merge_overrides,
)

logger = logging.getLogger(__name__)

SUMMARY_TIMEOUT = 60.0
KEY_TEST_TIMEOUT = 10.0
MODELS_TIMEOUT = 15.0

PARSE_ERROR_MESSAGE = "Could not parse AI response. The service may be experiencing issues."
KEY_OK_MESSAGE = "API key is valid and working!"
INVALID_KEY_CHARS_MESSAGE = (
    "API key contains invalid characters. Please re-enter it without spaces or formatting."
)


class SummaryProvider(ABC):
    """Base class for AI search summary providers.

    Instances are request-scoped value holders: they keep only the
    constructor configuration and open a fresh HTTP client per call.
    """

    provider_id: ClassVar[str] = ""
    provider_name: ClassVar[str] = ""
    short_name: ClassVar[str] = ""
    default_model: ClassVar[str] = ""
    available_models: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        api_key: str | None = "",
        model: str | None = "",
        *,
        timeout: float = SUMMARY_TIMEOUT,
        trust_env: bool = True,
        transport: httpx.BaseTransport | None = None,
        site_name: str | None = None,
        max_results: int = MAX_RESULTS,
        capabilities: Mapping[str, Mapping[str, bool]] | None = None,
        llm_logger: logging.Logger | None = None,
        log_cfg: LoggingConfig | None = None,
    ):
        self.api_key = (api_key or "").strip()
        self.timeout = timeout
        self.trust_env = trust_env
        self.transport = transport
        self.site_name = site_name
        self.max_results = min(MAX_RESULTS, max(1, int(max_results)))
        self.llm_logger = llm_logger
        self.log_cfg = log_cfg or LoggingConfig()
        self.capability_table = merge_overrides(family_table(self.provider_id), capabilities)
        self.model = self._resolve_model(model)

    def get_available_models(self) -> list[str]:
        return list(self.available_models)

    def get_default_model(self) -> str:
        return self.default_model

    @property
    def capabilities(self) -> ModelCapabilities:
        return lookup_capabilities(self.model, self.capability_table)

    def is_known_model(self, model: str) -> bool:
        return model in self.available_models or matches_family(model, self.capability_table)

    def generate_summary(
        self,
        query: str,
        posts: Sequence[PostContext | Mapping[str, Any]],
    ) -> SummaryResult:
        """Answer ``query`` from ``posts`` and return the normalized result.

        Never raises for vendor, transport or model-output failures; those
        come back as a result with ``error`` set.
        """
        if not self.api_key:
            return SummaryResult.failure(
                f"{self.provider_name} API key is not configured.",
                ErrorCategory.CONFIGURATION.value,
            )

        post_list = _coerce_posts(posts)
        system_message = build_system_prompt(self.site_name, self.max_results)
        user_message = build_user_message(query, post_list)
        body = self._build_request_body(system_message, user_message)

        with start_span(
            f"{self.provider_id}.generate_summary",
            kind="llm",
            input_value=user_message,
            attributes={
                "llm.provider": self.provider_id,
                "llm.model": self.model,
                "search.post_count": len(post_list),
            },
        ) as span:
            try:
                data = self._request(
                    "POST",
                    self._endpoint(),
                    payload=body,
                    params=self._query_params(),
                    timeout=self.timeout,
                )
            except ProviderError as exc:
                message = summary_error_message(exc, self.provider_name)
                record_span_error(span, message)
                logger.warning(
                    "%s summary request failed (%s): %s",
                    self.provider_name,
                    exc.category.value,
                    exc.detail or exc.status_code,
                )
                self._log_llm_response(
                    event="llm_generate_summary",
                    status=exc.category.value,
                    content=exc.detail,
                    prompt=user_message,
                    post_count=len(post_list),
                )
                return SummaryResult.failure(message, exc.category.value)

            content = self._extract_text(data)
            result = self._parse_content(content)
            set_span_output(span, content)
            if not result.ok:
                record_span_error(span, result.error or "")
            self._log_llm_response(
                event="llm_generate_summary",
                status=result.error_type or "ok",
                content=content,
                prompt=user_message,
                post_count=len(post_list),
            )
            return result

    def summarize(self, request: SummaryRequest) -> SummaryResult:
        return self.generate_summary(request.query, request.posts)

    def test_api_key(self) -> KeyTestResult:
        """Probe the vendor with a cheap authenticated request."""
        if not self.api_key:
            return KeyTestResult(
                success=False,
                message="API key is empty.",
                error_type=ErrorCategory.CONFIGURATION.value,
            )

        with start_span(
            f"{self.provider_id}.test_api_key",
            kind="http",
            attributes={"llm.provider": self.provider_id, "llm.model": self.model},
        ) as span:
            try:
                data = self._probe_api_key()
            except ProviderError as exc:
                message = key_test_message(exc, self.provider_name)
                record_span_error(span, message)
                logger.info(
                    "%s API key test failed (%s)", self.provider_name, exc.category.value
                )
                return KeyTestResult(
                    success=False,
                    message=message,
                    error_type=exc.category.value,
                )
            details = self._key_test_details(data)
            set_span_output(span, details)
        return KeyTestResult(success=True, message=KEY_OK_MESSAGE, details=details)

    @abstractmethod
    def fetch_models_from_api(self) -> list[str]:
        """Return the vendor's live model catalog; never raises."""
        raise NotImplementedError

    @abstractmethod
    def _endpoint(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def _build_request_body(self, system_message: str, user_message: str) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def _extract_text(self, data: Any) -> str:
        """Locate the model's raw text in the vendor response envelope."""
        raise NotImplementedError

    @abstractmethod
    def _probe_api_key(self) -> Any:
        raise NotImplementedError

    def _key_test_details(self, data: Any) -> dict[str, Any]:
        return {}

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _query_params(self) -> dict[str, str] | None:
        return None

    def _classify_response(self, response: httpx.Response, detail: str | None) -> ErrorCategory:
        return classify_status(response.status_code)

    def _request(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = SUMMARY_TIMEOUT,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            ProviderError: On transport failure, non-2xx status, or a body
                that is not JSON
        """
        request_headers = self._headers() if headers is None else headers
        try:
            with httpx.Client(
                timeout=timeout,
                trust_env=self.trust_env,
                transport=self.transport,
            ) as client:
                resp = client.request(
                    method,
                    url,
                    params=params,
                    json=payload,
                    headers=request_headers,
                )
        except httpx.HTTPError as exc:
            raise ProviderError(
                classify_transport_error(exc),
                redact_secrets(str(exc)) or type(exc).__name__,
            ) from exc
        except UnicodeEncodeError as exc:
            # Header values must be ASCII; usually a key pasted with an
            # invisible character
            raise ProviderError(ErrorCategory.CONFIGURATION, INVALID_KEY_CHARS_MESSAGE) from exc

        if not resp.is_success:
            detail = extract_error_message(resp)
            raise ProviderError(
                self._classify_response(resp, detail),
                redact_secrets(detail or ""),
                resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(ErrorCategory.DECODE, "Response body is not JSON") from exc

    def _parse_content(self, content: str) -> SummaryResult:
        if not content or not content.strip():
            return SummaryResult.failure(
                f"{self.short_name} returned an empty response. Please try again.",
                ErrorCategory.EMPTY_RESPONSE.value,
            )
        try:
            obj = parse_model_json(content)
        except ModelOutputError:
            logger.warning("%s returned output that is not a JSON object", self.provider_name)
            return SummaryResult.failure(PARSE_ERROR_MESSAGE, ErrorCategory.PARSE.value)
        return normalize_summary(obj, self.max_results)

    def _resolve_model(self, model: str | None) -> str:
        model = (model or "").strip()
        if not model:
            return self.default_model
        if self.is_known_model(model):
            return model
        logger.warning(
            "Unrecognized %s model %r, falling back to %s",
            self.provider_name,
            model,
            self.default_model,
        )
        return self.default_model

    def _log_llm_response(
        self,
        event: str,
        status: str,
        content: str,
        prompt: str,
        **fields: Any,
    ) -> None:
        if self.llm_logger is None:
            return
        detail = self.log_cfg.llm_log_detail
        redaction = self.log_cfg.llm_log_redaction
        payload = {
            "event": event,
            "status": status,
            "provider": self.provider_id,
            "model": self.model,
            **fields,
        }
        if detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
        payload["raw_response"] = truncate_text(redact_text(content or "", redaction))
        log_event(self.llm_logger, "LLM response", **payload)


def _coerce_posts(posts: Sequence[PostContext | Mapping[str, Any]]) -> list[PostContext]:
    coerced: list[PostContext] = []
    for post in posts:
        if isinstance(post, PostContext):
            coerced.append(post)
            continue
        if not isinstance(post, Mapping):
            logger.warning("Skipping post: not a mapping (%s)", type(post).__name__)
            continue
        try:
            coerced.append(PostContext.from_mapping(post))
        except ValueError as exc:
            logger.warning("Skipping post: %s", exc)
    return coerced
