"""AI vendor adapters for search summaries."""

from .base import SummaryProvider
from .capabilities import ModelCapabilities, register_model_family
from .claude import ClaudeProvider
from .factory import (
    create_provider,
    create_provider_from_config,
    get_available_providers,
    get_default_provider,
    get_provider_name,
    is_valid_provider,
)
from .gemini import GeminiProvider
from .openai import OpenAIProvider

__all__ = [
    "SummaryProvider",
    "ModelCapabilities",
    "register_model_family",
    "ClaudeProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "create_provider",
    "create_provider_from_config",
    "get_available_providers",
    "get_default_provider",
    "get_provider_name",
    "is_valid_provider",
]
