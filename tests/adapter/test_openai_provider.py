"""
OpenAI Provider Tests
=====================

Request shape and failure mapping, over httpx.MockTransport.

INVARIANTS TESTED:
1. Only model + messages are sent (response_format only in JSON mode)
2. complete() never raises; every failure has an error code
"""

import json

import httpx
import pytest

from adapter.providers.base import InvocationParams, ProviderErrorCode
from adapter.providers.openai import OpenAIChatProvider, extract_text
from culture_engine.contracts.snapshot import PromptPayload


PAYLOAD = PromptPayload(system="sys", user="usr", mode="single")
JSON_PAYLOAD = PromptPayload(system="sys", user="usr", mode="single", output_format="json")


def completion(content="Narrative"):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_provider(handler, api_key="sk-test"):
    return OpenAIChatProvider(
        api_key=api_key,
        model="gpt-5",
        base_url="https://llm.example.com/v1/",
        transport=httpx.MockTransport(handler),
    )


class TestRequestShape:

    def test_posts_model_and_messages_only(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion())

        response = make_provider(handler).complete(PAYLOAD, InvocationParams())

        assert response.success
        assert response.content == "Narrative"
        assert seen["url"] == "https://llm.example.com/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"] == {
            "model": "gpt-5",
            "messages": [
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "usr"},
            ],
        }

    def test_json_mode_requests_json_object(self):
        body = make_provider(lambda r: httpx.Response(200)).request_body(JSON_PAYLOAD)

        assert body["response_format"] == {"type": "json_object"}


class TestFailureMapping:

    def test_missing_key_does_not_call_upstream(self):
        def handler(request):
            raise AssertionError("should not be called")

        response = make_provider(handler, api_key="").complete(PAYLOAD, InvocationParams())

        assert not response.success
        assert response.error_code is ProviderErrorCode.NOT_CONFIGURED

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        response = make_provider(handler).complete(PAYLOAD, InvocationParams(timeout_seconds=0.1))

        assert response.error_code is ProviderErrorCode.TIMEOUT

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        response = make_provider(handler).complete(PAYLOAD, InvocationParams())

        assert response.error_code is ProviderErrorCode.NETWORK_ERROR
        assert "Upstream fetch failed" in response.error_message

    @pytest.mark.parametrize("status,code", [
        (429, ProviderErrorCode.RATE_LIMITED),
        (400, ProviderErrorCode.API_ERROR),
        (500, ProviderErrorCode.API_ERROR),
    ])
    def test_http_errors_keep_status_and_detail(self, status, code):
        provider = make_provider(lambda r: httpx.Response(status, text='{"error": "unsupported_value"}'))

        response = provider.complete(PAYLOAD, InvocationParams())

        assert response.error_code is code
        assert response.status_code == status
        assert "unsupported_value" in response.detail

    def test_invalid_json_body(self):
        response = make_provider(lambda r: httpx.Response(200, text="<html>")).complete(
            PAYLOAD, InvocationParams()
        )

        assert response.error_code is ProviderErrorCode.INVALID_RESPONSE


class TestExtractText:

    @pytest.mark.parametrize("data", [{}, {"choices": []}, {"choices": [{}]}, None, completion(None)])
    def test_missing_content_is_empty(self, data):
        assert extract_text(data) == ""

    def test_content(self):
        assert extract_text(completion("Hi")) == "Hi"
