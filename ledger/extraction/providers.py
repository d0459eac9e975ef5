# -*- coding: utf-8 -*-
"""
Inference providers for the extraction fallback chain.

Every provider exposes ``attempt_extract(prompt) -> dict | None``:
a JSON object on success, ``None`` on any failure (logged). Providers only
differ in transport and response envelope:

- ChatCompletionProvider: OpenAI SDK, ``choices[0].message.content``
  (OpenAI itself and Groq's OpenAI-compatible endpoint)
- AnthropicProvider: Messages API over requests, ``content[0].text``
- GeminiProvider: generateContent over requests,
  ``candidates[0].content.parts[0].text``
"""

import json
import logging
import re
from typing import Any, Optional

import requests
from openai import OpenAI, OpenAIError

from ledger.extraction.prompt import RAW_JSON_SUFFIX, RESPONSE_TEMPLATE, SYSTEM_PROMPT

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class ProviderError(Exception):
    """A configured provider failed to produce a JSON object."""


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences around a JSON reply."""
    return _CODE_FENCE.sub("", text or "").strip()


def decode_json_payload(content: Any) -> dict:
    """
    Decode a provider reply into a JSON object.

    Accepts an already-decoded mapping, or a string (optionally wrapped in
    markdown fences) holding a JSON object.

    Raises:
        ProviderError: not a JSON object
    """
    if isinstance(content, dict):
        return content
    if not isinstance(content, str) or not content.strip():
        raise ProviderError("Empty response content")
    try:
        payload = json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        raise ProviderError(f"Invalid JSON in response: {e}") from e
    if not isinstance(payload, dict):
        raise ProviderError(f"Expected JSON object, got {type(payload).__name__}")
    return payload


def unwrap_envelope(data: Any) -> Any:
    """
    Locate the reply content in a provider response body.

    Known envelopes are tried in order; a body that already is the result
    object (native JSON style) is returned as is.
    """
    if not isinstance(data, dict):
        raise ProviderError("Response body is not a JSON object")

    try:
        if "choices" in data:
            return data["choices"][0]["message"]["content"]
        if "content" in data and isinstance(data["content"], list):
            return data["content"][0]["text"]
        if "candidates" in data:
            return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderError(f"Unexpected response envelope: {e}") from e

    if any(key in data for key in RESPONSE_TEMPLATE):
        return data
    raise ProviderError("Unknown response envelope")


class InferenceProvider:
    """Base class for one link of the fallback chain."""

    name = "provider"

    def __init__(self, api_key: Optional[str], model: str, *, timeout: int = 30):
        self.api_key = api_key or ""
        self.model = model
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def request_json(self, prompt: str) -> dict:
        """Send the prompt and return the decoded JSON object.

        Raises:
            ProviderError: transport, HTTP or decoding failure
        """
        raise NotImplementedError

    def attempt_extract(self, prompt: str) -> Optional[dict]:
        if not self.configured:
            logger.debug(f"{self.name} not configured, skipping")
            return None
        try:
            payload = self.request_json(prompt)
        except ProviderError as e:
            logger.warning(f"{self.name} extraction failed: {e}")
            return None
        logger.debug(f"{self.name} extraction response: {payload}")
        return payload


class ChatCompletionProvider(InferenceProvider):
    """OpenAI-compatible chat completions (OpenAI, Groq)."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        *,
        name: str = "openai",
        base_url: Optional[str] = None,
        timeout: int = 30,
    ):
        super().__init__(api_key, model, timeout=timeout)
        self.name = name
        self.base_url = base_url

    def _client(self) -> OpenAI:
        if self.base_url:
            return OpenAI(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout)
        return OpenAI(api_key=self.api_key, timeout=self.timeout)

    def request_json(self, prompt: str) -> dict:
        try:
            completion = self._client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.1,
                response_format={"type": "json_object"},
            )
            content = completion.choices[0].message.content
        except OpenAIError as e:
            raise ProviderError(f"API error: {e}") from e
        except (AttributeError, IndexError) as e:
            raise ProviderError(f"Unexpected completion shape: {e}") from e
        return decode_json_payload(content)


class HttpJsonProvider(InferenceProvider):
    """Provider speaking plain JSON over HTTP via requests."""

    def endpoint(self) -> str:
        raise NotImplementedError

    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def body(self, prompt: str) -> dict:
        raise NotImplementedError

    def request_json(self, prompt: str) -> dict:
        try:
            response = requests.post(
                self.endpoint(),
                headers=self.headers(),
                json=self.body(prompt),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise ProviderError("Request timeout") from e
        except requests.RequestException as e:
            raise ProviderError(f"Request error: {e}") from e

        if not response.ok:
            raise ProviderError(f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Response body is not JSON: {e}") from e

        return decode_json_payload(unwrap_envelope(data))


class AnthropicProvider(HttpJsonProvider):
    name = "claude"

    API_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"

    def endpoint(self) -> str:
        return self.API_URL

    def headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.API_VERSION,
            "content-type": "application/json",
        }

    def body(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "max_tokens": 1024,
            "messages": [{"role": "user", "content": prompt + RAW_JSON_SUFFIX}],
        }


class GeminiProvider(HttpJsonProvider):
    name = "gemini"

    API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent?key={key}"

    def endpoint(self) -> str:
        return self.API_URL.format(model=self.model, key=self.api_key)

    def body(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt + RAW_JSON_SUFFIX}]}],
            "generationConfig": {"response_mime_type": "application/json"},
        }
