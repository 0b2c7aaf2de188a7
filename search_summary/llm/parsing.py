"""Parsing and normalization of the model's JSON answer.

Models are asked for a bare JSON object but regularly wrap it in markdown
fences, surround it with prose, or encode it twice. ``parse_model_json``
recovers the object from those shapes; ``normalize_summary`` turns it into
a ``SummaryResult``.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..core.types import SummaryResult


MAX_RESULTS = 5
FALLBACK_ANSWER_HTML = "<p>AI summary did not return a valid answer.</p>"

_FENCE_RE = re.compile(r"```[ \t]*(?:json)?[ \t]*\n?(.*?)```", re.DOTALL | re.IGNORECASE)


class ModelOutputError(ValueError):
    """The model output does not contain a JSON object."""


def strip_code_fences(content: str) -> str:
    """Return the body of the first fenced block, or the text unchanged."""
    match = _FENCE_RE.search(content)
    if match is None:
        return content.strip()
    return match.group(1).strip()


def extract_json_object(content: str) -> str | None:
    """Return the substring between the first '{' and the last '}'."""
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return content[start : end + 1]


def parse_model_json(content: str) -> dict[str, Any]:
    """Decode the model's answer object.

    Tries the raw text, then the fence-stripped text, then the outermost
    brace-delimited substring of each.

    Raises:
        ModelOutputError: If no JSON object can be recovered
    """
    if not content or not content.strip():
        raise ModelOutputError("Empty content")

    stripped = strip_code_fences(content)
    candidates = [content, stripped]
    # A fence inside the answer or a fenced note before the object makes
    # the stripped text miss it, so the raw text is searched as well
    for text in (stripped, content):
        snippet = extract_json_object(text)
        if snippet is not None and snippet not in candidates:
            candidates.append(snippet)

    for candidate in candidates:
        obj = _loads_object(candidate)
        if obj is not None:
            return obj
    raise ModelOutputError("No JSON object found")


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError:
        return None
    # A JSON string holding the object itself
    if isinstance(obj, str):
        try:
            obj = json.loads(obj)
        except json.JSONDecodeError:
            return None
    if isinstance(obj, dict):
        return obj
    return None


def unwrap_double_encoded(obj: dict[str, Any]) -> dict[str, Any]:
    """Unwrap an answer whose answer_html is itself the whole JSON payload."""
    inner = obj.get("answer_html")
    if not isinstance(inner, str):
        return obj
    inner = inner.strip()
    if not inner.startswith("{") or '"answer_html"' not in inner:
        return obj
    try:
        decoded = json.loads(inner)
    except json.JSONDecodeError:
        return obj
    if isinstance(decoded, dict) and "answer_html" in decoded:
        return decoded
    return obj


def normalize_summary(obj: dict[str, Any], max_results: int = MAX_RESULTS) -> SummaryResult:
    """Fill safe defaults and cap the source list."""
    obj = unwrap_double_encoded(obj)

    answer_html = obj.get("answer_html")
    if not isinstance(answer_html, str) or not answer_html.strip():
        answer_html = FALLBACK_ANSWER_HTML

    results = obj.get("results")
    if not isinstance(results, list):
        results = []
    results = [item for item in results if isinstance(item, dict)][:max_results]

    return SummaryResult(answer_html=answer_html, results=results)
