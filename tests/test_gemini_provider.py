"""Tests for the Google Gemini generateContent adapter."""

from __future__ import annotations

import json

import httpx

from search_summary.llm.providers.gemini import GeminiProvider


def _gemini_reply(*parts) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": list(parts)}}]})


def test_generate_summary_sends_key_as_query_param(vendor, winter_posts, winter_payload):
    fake = vendor(_gemini_reply({"text": json.dumps(winter_payload)}))
    provider = GeminiProvider("AIza-test", "gemini-1.5-pro", transport=fake.transport)

    result = provider.generate_summary("range in cold weather", winter_posts)

    assert result.to_dict() == winter_payload
    request = fake.last_request
    assert request.url.path == "/v1beta/models/gemini-1.5-pro:generateContent"
    assert request.url.host == "generativelanguage.googleapis.com"
    assert request.url.params["key"] == "AIza-test"
    assert "Authorization" not in request.headers


def test_prompt_is_sent_as_single_part(vendor, winter_posts, winter_payload):
    fake = vendor(_gemini_reply({"text": json.dumps(winter_payload)}))
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    provider.generate_summary("range", winter_posts)

    body = fake.last_json()
    parts = body["contents"][0]["parts"]
    assert len(parts) == 1
    text = parts[0]["text"]
    assert text.startswith("You are the AI search engine for")
    assert text.rstrip().endswith("User search query: range")
    assert body["generationConfig"] == {
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 2048,
        "temperature": 0.2,
        "responseMimeType": "application/json",
    }


def test_gemini_pro_has_no_json_mime_type(vendor, winter_posts, winter_payload):
    fake = vendor(_gemini_reply({"text": json.dumps(winter_payload)}))
    provider = GeminiProvider("AIza-test", "gemini-pro", transport=fake.transport)

    provider.generate_summary("range", winter_posts)

    assert "responseMimeType" not in fake.last_json()["generationConfig"]


def test_thought_parts_are_skipped(vendor, winter_posts, winter_payload):
    text = json.dumps(winter_payload)
    fake = vendor(
        _gemini_reply(
            {"thought": True, "text": "thinking about winter range"},
            {"text": text[:10]},
            {"text": text[10:]},
        )
    )
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    result = provider.generate_summary("range", winter_posts)

    assert result.to_dict() == winter_payload


def test_blocked_response_without_candidates_is_empty(vendor, winter_posts):
    fake = vendor(httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}}))
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    result = provider.generate_summary("range", winter_posts)

    assert result.error == "Gemini returned an empty response. Please try again."


def test_bad_key_reported_as_400_is_invalid_key(vendor, winter_posts):
    fake = vendor(
        httpx.Response(
            400,
            json={
                "error": {
                    "code": 400,
                    "message": "API key not valid. Please pass a valid API key.",
                    "status": "INVALID_ARGUMENT",
                }
            },
        )
    )
    provider = GeminiProvider("AIza-bad", transport=fake.transport)

    result = provider.generate_summary("range", winter_posts)

    assert result.error == "Invalid API key. Please check your plugin settings."
    assert result.error_type == "invalid_key"


def test_other_400_surfaces_vendor_message(vendor, winter_posts):
    fake = vendor(
        httpx.Response(400, json={"error": {"message": "Request contains an invalid argument."}})
    )
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    result = provider.generate_summary("range", winter_posts)

    assert result.error == "Request contains an invalid argument."
    assert result.error_type == "http_error"


def test_fetch_models_strips_prefix_and_filters(vendor):
    fake = vendor(
        httpx.Response(
            200,
            json={
                "models": [
                    {"name": "models/gemini-1.5-pro"},
                    {"name": "models/embedding-001"},
                    {"name": "models/gemini-1.5-flash"},
                    {"name": "models/aqa"},
                    {"displayName": "no name"},
                ]
            },
        )
    )
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    assert provider.fetch_models_from_api() == ["gemini-1.5-flash", "gemini-1.5-pro"]
    assert fake.last_request.url.path == "/v1beta/models"
    assert fake.last_request.url.params["key"] == "AIza-test"


def test_fetch_models_falls_back_to_static_list_on_empty_catalog(vendor):
    fake = vendor(httpx.Response(200, json={"models": []}))
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    assert provider.fetch_models_from_api() == provider.get_available_models()


def test_fetch_models_falls_back_when_no_gemini_models(vendor):
    fake = vendor(httpx.Response(200, json={"models": [{"name": "models/embedding-001"}]}))
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    assert provider.fetch_models_from_api() == provider.get_available_models()


def test_fetch_models_falls_back_on_undecodable_body(vendor):
    fake = vendor(httpx.Response(200, text="<html>proxy error</html>"))
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    assert provider.fetch_models_from_api() == provider.get_available_models()


def test_fetch_models_returns_empty_on_http_error(vendor):
    fake = vendor(httpx.Response(403, json={"error": {"message": "Permission denied"}}))
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    assert provider.fetch_models_from_api() == []


def test_fetch_models_without_key_returns_empty(vendor):
    fake = vendor()
    provider = GeminiProvider("", transport=fake.transport)

    assert provider.fetch_models_from_api() == []
    assert fake.requests == []


def test_api_key_test_reports_model_count(vendor):
    fake = vendor(
        httpx.Response(200, json={"models": [{"name": "models/gemini-1.5-pro"}, {"name": "models/aqa"}]})
    )
    provider = GeminiProvider("AIza-test", transport=fake.transport)

    outcome = provider.test_api_key()

    assert outcome.success
    assert outcome.details == {"model_count": 2}


def test_api_key_test_invalid_key(vendor):
    fake = vendor(httpx.Response(400, json={"error": {"message": "API key not valid."}}))
    provider = GeminiProvider("AIza-bad", transport=fake.transport)

    outcome = provider.test_api_key()

    assert not outcome.success
    assert outcome.message == "Invalid API key. Please check your key and try again."
