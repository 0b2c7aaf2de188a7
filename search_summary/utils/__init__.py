"""
Shared utility functions.

This package contains logging and redaction helpers used by the
provider adapters and the CLI.
"""

from .logging import (
    JsonlFormatter,
    log_event,
    redact_secrets,
    redact_text,
    setup_llm_logger,
    setup_logging,
    truncate_text,
)

__all__ = [
    "JsonlFormatter",
    "log_event",
    "redact_secrets",
    "redact_text",
    "setup_llm_logger",
    "setup_logging",
    "truncate_text",
]
