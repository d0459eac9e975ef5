from __future__ import annotations

import json
from typing import Optional
from unittest.mock import Mock

import requests


def make_openai_client_with_content(content: str) -> Mock:
    mock_client = Mock()

    mock_completion = Mock()
    mock_completion.choices = [Mock()]
    mock_completion.choices[0].message.content = content

    mock_client.chat.completions.create.return_value = mock_completion
    return mock_client


def set_openai_mock_content(mock_openai: Mock, content: str) -> Mock:
    client = make_openai_client_with_content(content)
    mock_openai.return_value = client
    return client


def make_openai_client_with_json(payload: object) -> Mock:
    return make_openai_client_with_content(json.dumps(payload, ensure_ascii=False))


def make_requests_response(payload: object = None, status_code: int = 200, text: Optional[str] = None) -> Mock:
    """Mock of ``requests.Response`` for HTTP providers."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text if text is not None else json.dumps(payload, ensure_ascii=False)
    if payload is None and text is not None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


class FakeProvider:
    """Provider double recording every prompt it receives."""

    def __init__(self, name: str, payload: Optional[dict] = None, configured: bool = True):
        self.name = name
        self.payload = payload
        self.configured = configured
        self.calls: list[str] = []

    def attempt_extract(self, prompt: str) -> Optional[dict]:
        self.calls.append(prompt)
        return self.payload
