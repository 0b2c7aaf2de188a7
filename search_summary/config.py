"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: AI provider selection, credentials and timeouts
- SearchConfig: Host search settings (post limits, cache TTL, call budget)
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


MIN_CACHE_TTL = 60
MAX_CACHE_TTL = 86400
DEFAULT_CACHE_TTL = 3600

API_KEY_ENV_DEFAULTS = {
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GOOGLE_API_KEY",
}


@dataclass
class ProviderConfig:
    """Configuration for the AI provider.

    Attributes:
        name: Provider id ("openai", "claude" or "gemini")
        model: Model identifier, empty for the provider default
        api_key: Optional inline API key (overrides env var)
        api_key_env: Environment variable holding the key, defaults per provider
        timeout_seconds: Timeout for summary requests
        trust_env: Whether to respect system proxy settings for API requests
        model_capabilities: Extra model-family feature flags, keyed by family prefix,
            e.g. {"gpt-6": {"temperature": false, "json_mode": true}}
    """

    name: str = "openai"
    model: str = ""
    api_key: str | None = None
    api_key_env: str | None = None
    timeout_seconds: float = 60.0
    trust_env: bool = True
    model_capabilities: dict[str, dict[str, bool]] = field(default_factory=dict)


@dataclass
class SearchConfig:
    """Host search settings carried over from the site options.

    Attributes:
        enabled: Whether AI summaries are shown at all
        site_name: Site name used in the system prompt
        max_posts: Maximum number of posts sent as context (at least 1)
        content_length: Maximum characters of content per post
        max_sources: Maximum number of sources the model may return (1 to 5)
        cache_ttl: Seconds the host may cache a summary, clamped to [60, 86400]
        max_calls_per_minute: Host call budget, 0 disables the limit
    """

    enabled: bool = False
    site_name: str | None = None
    max_posts: int = 10
    content_length: int = 400
    max_sources: int = 5
    cache_ttl: int = DEFAULT_CACHE_TTL
    max_calls_per_minute: int = 30


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: LLM log detail level ("response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = True
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        environment: Langfuse environment label (optional)
        release: Langfuse release identifier (optional)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    environment: str | None = None
    release: str | None = None
    redaction: str = "redact_urls"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


DEFAULT_CONFIG = AppConfig()


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return _fromdict(_asdict(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(DEFAULT_CONFIG, raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    cfg = _fromdict(data)
    cfg.search = sanitize_search_config(cfg.search)
    return cfg


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "provider": {
            "name": cfg.provider.name,
            "model": cfg.provider.model,
            "api_key": cfg.provider.api_key,
            "api_key_env": cfg.provider.api_key_env,
            "timeout_seconds": cfg.provider.timeout_seconds,
            "trust_env": cfg.provider.trust_env,
            "model_capabilities": dict(cfg.provider.model_capabilities),
        },
        "search": {
            "enabled": cfg.search.enabled,
            "site_name": cfg.search.site_name,
            "max_posts": cfg.search.max_posts,
            "content_length": cfg.search.content_length,
            "max_sources": cfg.search.max_sources,
            "cache_ttl": cfg.search.cache_ttl,
            "max_calls_per_minute": cfg.search.max_calls_per_minute,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
            "llm_log_enabled": cfg.logging.llm_log_enabled,
            "llm_log_detail": cfg.logging.llm_log_detail,
            "llm_log_redaction": cfg.logging.llm_log_redaction,
            "llm_log_file": cfg.logging.llm_log_file,
        },
        "langfuse": {
            "enabled": cfg.langfuse.enabled,
            "public_key": cfg.langfuse.public_key,
            "secret_key": cfg.langfuse.secret_key,
            "host": cfg.langfuse.host,
            "environment": cfg.langfuse.environment,
            "release": cfg.langfuse.release,
            "redaction": cfg.langfuse.redaction,
            "max_text_chars": cfg.langfuse.max_text_chars,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        provider=ProviderConfig(**data["provider"]),
        search=SearchConfig(**data["search"]),
        logging=LoggingConfig(**data["logging"]),
        langfuse=LangfuseConfig(**data.get("langfuse", {})),
    )


def sanitize_search_config(cfg: SearchConfig) -> SearchConfig:
    """Clamp search settings to their allowed ranges."""
    site_name = str(cfg.site_name).strip() if cfg.site_name else ""
    return SearchConfig(
        enabled=bool(cfg.enabled),
        site_name=site_name or None,
        max_posts=max(1, _as_int(cfg.max_posts, 10)),
        content_length=max(1, _as_int(cfg.content_length, 400)),
        max_sources=min(5, max(1, _as_int(cfg.max_sources, 5))),
        cache_ttl=clamp_cache_ttl(cfg.cache_ttl),
        max_calls_per_minute=max(0, _as_int(cfg.max_calls_per_minute, 30)),
    )


def clamp_cache_ttl(value: Any) -> int:
    """Clamp a cache TTL to [MIN_CACHE_TTL, MAX_CACHE_TTL]."""
    if value is None:
        return DEFAULT_CACHE_TTL
    ttl = _as_int(value, DEFAULT_CACHE_TTL)
    return min(MAX_CACHE_TTL, max(MIN_CACHE_TTL, ttl))


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    if cfg.api_key_env:
        return os.getenv(cfg.api_key_env)
    env_name = API_KEY_ENV_DEFAULTS.get(cfg.name.lower().strip(), "OPENAI_API_KEY")
    return os.getenv(env_name)
