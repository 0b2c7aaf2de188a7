"""Per-model feature flags keyed by model family prefix.

Vendors do not expose which request options a model accepts, so the
adapters look them up here. The longest matching prefix wins; models
matching no family get the table's fallback entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class ModelCapabilities:
    """Request options a model family accepts.

    Attributes:
        temperature: Whether the model accepts a temperature parameter
        json_mode: Whether the model supports a structured JSON response mode
    """

    temperature: bool = True
    json_mode: bool = False


DEFAULT_CAPABILITIES = ModelCapabilities()

OPENAI_MODEL_FAMILIES: dict[str, ModelCapabilities] = {
    "gpt-5": ModelCapabilities(temperature=False, json_mode=True),
    "gpt-4.1": ModelCapabilities(temperature=True, json_mode=True),
    "gpt-4o": ModelCapabilities(temperature=True, json_mode=True),
    "gpt-4-turbo": ModelCapabilities(temperature=True, json_mode=False),
    "gpt-4": ModelCapabilities(temperature=True, json_mode=False),
    "gpt-3.5-turbo": ModelCapabilities(temperature=True, json_mode=False),
}

GEMINI_MODEL_FAMILIES: dict[str, ModelCapabilities] = {
    "gemini-3": ModelCapabilities(temperature=True, json_mode=True),
    "gemini-2": ModelCapabilities(temperature=True, json_mode=True),
    "gemini-1.5": ModelCapabilities(temperature=True, json_mode=True),
    "gemini-1.0": ModelCapabilities(temperature=True, json_mode=False),
    "gemini-pro": ModelCapabilities(temperature=True, json_mode=False),
}

CLAUDE_MODEL_FAMILIES: dict[str, ModelCapabilities] = {
    "claude-": ModelCapabilities(temperature=True, json_mode=False),
}

_TABLES: dict[str, dict[str, ModelCapabilities]] = {
    "openai": OPENAI_MODEL_FAMILIES,
    "gemini": GEMINI_MODEL_FAMILIES,
    "claude": CLAUDE_MODEL_FAMILIES,
}


def family_table(provider_id: str) -> dict[str, ModelCapabilities]:
    try:
        return _TABLES[provider_id]
    except KeyError:
        raise ValueError(f"No capability table for provider: {provider_id}") from None


def lookup_capabilities(
    model: str,
    table: Mapping[str, ModelCapabilities],
    fallback: ModelCapabilities = DEFAULT_CAPABILITIES,
) -> ModelCapabilities:
    """Return the capabilities of the longest family prefix matching ``model``."""
    best: str | None = None
    for prefix in table:
        if model.startswith(prefix) and (best is None or len(prefix) > len(best)):
            best = prefix
    if best is None:
        return fallback
    return table[best]


def matches_family(model: str, table: Mapping[str, ModelCapabilities]) -> bool:
    return any(model.startswith(prefix) for prefix in table)


def register_model_family(
    provider_id: str,
    prefix: str,
    capabilities: ModelCapabilities | Mapping[str, bool],
) -> None:
    """Add or replace a model family entry for a provider."""
    if not prefix:
        raise ValueError("Model family prefix must not be empty")
    if not isinstance(capabilities, ModelCapabilities):
        capabilities = ModelCapabilities(**dict(capabilities))
    family_table(provider_id)[prefix] = capabilities


def merge_overrides(
    table: Mapping[str, ModelCapabilities],
    overrides: Mapping[str, Mapping[str, bool]] | None,
) -> dict[str, ModelCapabilities]:
    """Return a copy of ``table`` with config-supplied families applied."""
    merged = dict(table)
    for prefix, flags in (overrides or {}).items():
        merged[prefix] = ModelCapabilities(**dict(flags))
    return merged
