"""
Search Summary - AI answers for site search.

This package turns a search query and the posts matched by the host
search into a short AI-written answer with linked sources, using OpenAI,
Anthropic Claude or Google Gemini behind one provider interface.

Example:
    >>> from search_summary import create_provider
    >>> provider = create_provider("openai", api_key, "gpt-4o-mini")
    >>> provider.generate_summary("range in cold weather", posts).to_dict()
"""

__all__ = [
    "__version__",
    "PostContext",
    "SummaryRequest",
    "SummaryResult",
    "KeyTestResult",
    "create_provider",
    "get_available_providers",
    "is_valid_provider",
    "get_default_provider",
]
__version__ = "0.1.0"

from .core.types import KeyTestResult, PostContext, SummaryRequest, SummaryResult
from .llm.providers.factory import (
    create_provider,
    get_available_providers,
    get_default_provider,
    is_valid_provider,
)
