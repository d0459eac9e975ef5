# -*- coding: utf-8 -*-
"""
Extraction Resolver

Turns free text into an ``ExtractionResult``:

1. Build one prompt from the text and the reference name lists
2. Ask providers strictly in priority order; the first JSON object wins
3. Normalize the raw payload (value, direction, classification, date)
4. Bind category/account/client names to ids by exact, case-insensitive match

Provider failures never raise: an exhausted chain returns None.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from ledger.config import ProviderConfig
from ledger.extraction.prompt import build_extraction_prompt
from ledger.extraction.providers import (
    AnthropicProvider,
    ChatCompletionProvider,
    GeminiProvider,
    InferenceProvider,
)
from ledger.extraction.types import Classification, ExtractionRequest, ExtractionResult
from ledger.models import Direction
from ledger.shared.locale_normalizer import normalize_date, to_canonical
from ledger.shared.reference_resolver import resolve_id

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


def _text(payload: dict, key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _canonical_value(raw: str) -> str:
    """Canonical decimal string; unparseable values are kept verbatim for review."""
    if not raw:
        return ""
    try:
        return format(to_canonical(raw), "f")
    except ValueError:
        logger.warning(f"Extracted value is not a number: {raw!r}")
        return raw


def build_result(payload: dict, request: ExtractionRequest, *, provider: str = "") -> ExtractionResult:
    """
    Normalize a provider payload and bind names to reference ids.

    Names that do not match exactly keep a None id; the raw name stays in
    ``*_name`` for human review.
    """
    category_name = _text(payload, "category_name")
    account_name = _text(payload, "account_name")
    client_name = _text(payload, "client_name")

    return ExtractionResult(
        value=_canonical_value(_text(payload, "value")),
        direction=Direction.from_string(_text(payload, "type"), default=Direction.EXPENSE),
        classification=Classification.from_string(_text(payload, "classification")),
        description=_text(payload, "description"),
        date=normalize_date(_text(payload, "date")),
        category_id=resolve_id(request.categories, category_name),
        account_id=resolve_id(request.accounts, account_name),
        client_id=resolve_id(request.contacts, client_name),
        category_name=category_name,
        account_name=account_name,
        client_name=client_name,
        suggested_category=_text(payload, "suggested_category"),
        weight=_text(payload, "weight"),
        shipping=_text(payload, "shipping"),
        seller=_text(payload, "seller"),
        dev_code=_text(payload, "dev_code"),
        provider=provider,
        raw=dict(payload),
    )


class ExtractionResolver:
    """Ordered provider fallback chain with deterministic name binding."""

    def __init__(self, providers: Sequence[InferenceProvider], *, today: Optional[date] = None):
        self.providers = list(providers)
        self.today = today

    def resolve(self, request: ExtractionRequest) -> Optional[ExtractionResult]:
        """
        Extract structured data from the request text.

        Args:
            request: text plus reference list snapshots

        Returns:
            ExtractionResult from the first provider that answered with a
            JSON object, or None (empty text, or every provider failed)
        """
        if not request.text or not request.text.strip():
            return None

        prompt = build_extraction_prompt(request, today=self.today)

        for provider in self.providers:
            if not provider.configured:
                logger.debug(f"Skipping unconfigured provider {provider.name}")
                continue
            payload = provider.attempt_extract(prompt)
            if payload is None:
                continue
            logger.info(f"Extraction answered by {provider.name}")
            return build_result(payload, request, provider=provider.name)

        logger.warning("All extraction providers failed or are unconfigured")
        return None

    def extract(self, text: str, categories=None, accounts=None, contacts=None) -> Optional[ExtractionResult]:
        """Convenience wrapper building the request from plain lists."""
        return self.resolve(ExtractionRequest.build(text, categories, accounts, contacts))


def build_default_resolver(config: Optional[ProviderConfig] = None, *, today: Optional[date] = None) -> ExtractionResolver:
    """
    Build the standard chain: Groq -> Claude -> Gemini -> OpenAI.

    Providers without a credential stay in the chain and are skipped.
    """
    cfg = config or ProviderConfig.from_env()
    providers: list[InferenceProvider] = [
        ChatCompletionProvider(
            cfg.groq_api_key,
            cfg.groq_model,
            name="groq",
            base_url=GROQ_BASE_URL,
            timeout=cfg.timeout,
        ),
        AnthropicProvider(cfg.claude_api_key, cfg.claude_model, timeout=cfg.timeout),
        GeminiProvider(cfg.gemini_api_key, cfg.gemini_model, timeout=cfg.timeout),
        ChatCompletionProvider(cfg.openai_api_key, cfg.openai_model, name="openai", timeout=cfg.timeout),
    ]
    return ExtractionResolver(providers, today=today)
