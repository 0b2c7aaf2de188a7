"""LLM provider adapters, prompts, parsing and observability."""

from .errors import ErrorCategory, ProviderError
from .parsing import ModelOutputError, normalize_summary, parse_model_json
from .providers import (
    ClaudeProvider,
    GeminiProvider,
    OpenAIProvider,
    SummaryProvider,
    create_provider,
    create_provider_from_config,
    get_available_providers,
    get_default_provider,
    is_valid_provider,
)
from .tracing import flush, record_span_error, set_span_output, setup_langfuse, start_span

__all__ = [
    "ErrorCategory",
    "ProviderError",
    "ModelOutputError",
    "normalize_summary",
    "parse_model_json",
    "ClaudeProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "SummaryProvider",
    "create_provider",
    "create_provider_from_config",
    "get_available_providers",
    "get_default_provider",
    "is_valid_provider",
    "setup_langfuse",
    "flush",
    "start_span",
    "set_span_output",
    "record_span_error",
]
