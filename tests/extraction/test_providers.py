# -*- coding: utf-8 -*-
"""
Test inference providers

All network access is mocked: OpenAI SDK for chat-completion providers,
requests.post for HTTP providers.
"""

from unittest.mock import patch

import pytest
import requests
from openai import OpenAIError

from ledger.extraction.providers import (
    AnthropicProvider,
    ChatCompletionProvider,
    GeminiProvider,
    ProviderError,
    decode_json_payload,
    strip_code_fences,
    unwrap_envelope,
)
from tests.test_utils import make_requests_response, set_openai_mock_content

PAYLOAD = {"value": "150.00", "type": "expense", "classification": "transaction"}


class TestDecoding:
    """Reply decoding helpers"""

    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_decode_fenced_json(self):
        assert decode_json_payload('```json\n{"value": "1.00"}\n```') == {"value": "1.00"}

    def test_decode_dict_passthrough(self):
        assert decode_json_payload(PAYLOAD) is PAYLOAD

    @pytest.mark.parametrize("content", ["", None, "not json", "[1, 2]"])
    def test_decode_rejects_non_objects(self, content):
        with pytest.raises(ProviderError):
            decode_json_payload(content)

    def test_unwrap_chat_envelope(self):
        assert unwrap_envelope({"choices": [{"message": {"content": "{}"}}]}) == "{}"

    def test_unwrap_anthropic_envelope(self):
        assert unwrap_envelope({"content": [{"type": "text", "text": "{}"}]}) == "{}"

    def test_unwrap_gemini_envelope(self):
        body = {"candidates": [{"content": {"parts": [{"text": "{}"}]}}]}
        assert unwrap_envelope(body) == "{}"

    def test_unwrap_native_object(self):
        assert unwrap_envelope(PAYLOAD) is PAYLOAD

    def test_unwrap_broken_envelope(self):
        with pytest.raises(ProviderError):
            unwrap_envelope({"candidates": []})

    def test_unwrap_unknown_body(self):
        with pytest.raises(ProviderError):
            unwrap_envelope({"error": "quota"})


class TestChatCompletionProvider:
    """OpenAI SDK based providers (OpenAI, Groq)"""

    @patch('ledger.extraction.providers.OpenAI')
    def test_success(self, mock_openai):
        client = set_openai_mock_content(mock_openai, '{"value": "150.00", "type": "expense"}')
        provider = ChatCompletionProvider("sk-test", "gpt-4o")

        assert provider.attempt_extract("prompt") == {"value": "150.00", "type": "expense"}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][-1]["content"] == "prompt"

    @patch('ledger.extraction.providers.OpenAI')
    def test_groq_base_url(self, mock_openai):
        set_openai_mock_content(mock_openai, "{}")
        provider = ChatCompletionProvider("gsk", "llama", name="groq", base_url="https://api.groq.com/openai/v1", timeout=5)

        provider.attempt_extract("prompt")

        mock_openai.assert_called_once_with(api_key="gsk", base_url="https://api.groq.com/openai/v1", timeout=5)

    @patch('ledger.extraction.providers.OpenAI')
    def test_api_error_returns_none(self, mock_openai):
        mock_openai.return_value.chat.completions.create.side_effect = OpenAIError("rate limited")
        provider = ChatCompletionProvider("sk-test", "gpt-4o")

        assert provider.attempt_extract("prompt") is None

    @patch('ledger.extraction.providers.OpenAI')
    def test_invalid_json_returns_none(self, mock_openai):
        set_openai_mock_content(mock_openai, "Desculpe, não entendi.")
        assert ChatCompletionProvider("sk-test", "gpt-4o").attempt_extract("prompt") is None

    @patch('ledger.extraction.providers.OpenAI')
    def test_unconfigured_never_calls_sdk(self, mock_openai):
        provider = ChatCompletionProvider(None, "gpt-4o")

        assert provider.configured is False
        assert provider.attempt_extract("prompt") is None
        mock_openai.assert_not_called()


class TestHttpProviders:
    """requests based providers (Claude, Gemini)"""

    @patch('ledger.extraction.providers.requests.post')
    def test_anthropic_success(self, mock_post):
        mock_post.return_value = make_requests_response({"content": [{"type": "text", "text": '```json\n{"value": "10.00"}\n```'}]})
        provider = AnthropicProvider("sk-ant", "claude-3-5-sonnet-20240620", timeout=7)

        assert provider.attempt_extract("prompt") == {"value": "10.00"}
        args, kwargs = mock_post.call_args
        assert args[0] == AnthropicProvider.API_URL
        assert kwargs["headers"]["x-api-key"] == "sk-ant"
        assert kwargs["timeout"] == 7
        assert kwargs["json"]["messages"][0]["content"].startswith("prompt")

    @patch('ledger.extraction.providers.requests.post')
    def test_gemini_success(self, mock_post):
        body = {"candidates": [{"content": {"parts": [{"text": '{"value": "3.50"}'}]}}]}
        mock_post.return_value = make_requests_response(body)
        provider = GeminiProvider("g-key", "gemini-1.5-flash")

        assert provider.attempt_extract("prompt") == {"value": "3.50"}
        url = mock_post.call_args.args[0]
        assert "gemini-1.5-flash:generateContent" in url
        assert url.endswith("key=g-key")

    @patch('ledger.extraction.providers.requests.post')
    def test_http_error_returns_none(self, mock_post):
        mock_post.return_value = make_requests_response({"error": "overloaded"}, status_code=529)
        assert AnthropicProvider("sk-ant", "claude").attempt_extract("prompt") is None

    @patch('ledger.extraction.providers.requests.post')
    def test_timeout_returns_none(self, mock_post):
        mock_post.side_effect = requests.Timeout()
        assert GeminiProvider("g-key", "gemini").attempt_extract("prompt") is None

    @patch('ledger.extraction.providers.requests.post')
    def test_connection_error_returns_none(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("offline")
        assert GeminiProvider("g-key", "gemini").attempt_extract("prompt") is None

    @patch('ledger.extraction.providers.requests.post')
    def test_non_json_body_returns_none(self, mock_post):
        mock_post.return_value = make_requests_response(text="<html>502</html>")
        assert AnthropicProvider("sk-ant", "claude").attempt_extract("prompt") is None
