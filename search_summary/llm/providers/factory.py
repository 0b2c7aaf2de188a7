"""Provider factory and registry for the supported AI vendors."""

from __future__ import annotations

from importlib import import_module
import logging
from typing import Any

from ...config import ProviderConfig, SearchConfig, get_api_key
from .base import SummaryProvider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"

_PROVIDER_NAMES: dict[str, str] = {
    "openai": "OpenAI (ChatGPT)",
    "gemini": "Google Gemini",
    "claude": "Anthropic Claude",
}

# id -> (module under this package, class name); imported on first use
_PROVIDER_REGISTRY: dict[str, tuple[str, str]] = {
    "openai": (".openai", "OpenAIProvider"),
    "gemini": (".gemini", "GeminiProvider"),
    "claude": (".claude", "ClaudeProvider"),
}


def get_available_providers() -> dict[str, str]:
    """Return provider ids mapped to display names, in menu order."""
    return dict(_PROVIDER_NAMES)


def get_provider_name(provider_id: str) -> str:
    return _PROVIDER_NAMES.get(_normalize(provider_id), "")


def is_valid_provider(provider_id: str | None) -> bool:
    return _normalize(provider_id) in _PROVIDER_REGISTRY


def get_default_provider() -> str:
    return DEFAULT_PROVIDER


def create_provider(
    provider_id: str | None,
    api_key: str | None = "",
    model: str | None = "",
    **options: Any,
) -> SummaryProvider | None:
    """Build a provider instance, or None when the provider is unavailable.

    None covers an unknown id, a backing module that cannot be loaded, and
    a constructor failure. Callers should surface a generic error for it.
    """
    name = _normalize(provider_id)
    entry = _PROVIDER_REGISTRY.get(name)
    if entry is None:
        logger.warning("Unknown provider: %s", provider_id)
        return None

    module_name, class_name = entry
    try:
        module = import_module(module_name, package=__package__)
        builder = getattr(module, class_name)
    except (ImportError, AttributeError) as exc:
        logger.warning("Provider implementation not found for %s: %s", name, exc)
        return None

    try:
        return builder(api_key, model, **options)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error creating provider %s: %s", name, exc)
        return None


def create_provider_from_config(
    cfg: ProviderConfig,
    search: SearchConfig | None = None,
    **options: Any,
) -> SummaryProvider | None:
    """Build a provider from runtime config, resolving the key from the environment.

    When ``search`` is given, its site name and source limit shape the prompt.
    """
    if search is not None:
        options.setdefault("site_name", search.site_name)
        options.setdefault("max_results", search.max_sources)
    options.setdefault("timeout", cfg.timeout_seconds)
    options.setdefault("trust_env", cfg.trust_env)
    if cfg.model_capabilities:
        options.setdefault("capabilities", cfg.model_capabilities)
    return create_provider(cfg.name, get_api_key(cfg) or "", cfg.model, **options)


def _normalize(provider_id: str | None) -> str:
    return (provider_id or "").lower().strip()
