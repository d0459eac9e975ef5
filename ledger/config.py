"""
Environment configuration module
Loads provider credentials and tunables from the environment.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load .env file (for local development)
load_dotenv()

# Inference provider credentials (all optional; a missing key skips that provider)
GROQ_API_KEY = os.getenv('GROQ_API_KEY', '')
CLAUDE_API_KEY = os.getenv('CLAUDE_API_KEY', '')
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')

# Optional environment variables (with defaults)
GROQ_MODEL = os.getenv('GROQ_MODEL', 'llama-3.3-70b-versatile')
CLAUDE_MODEL = os.getenv('CLAUDE_MODEL', 'claude-3-5-sonnet-20240620')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-1.5-flash')
GPT_MODEL = os.getenv('GPT_MODEL', 'gpt-4o')
AI_REQUEST_TIMEOUT = int(os.getenv('AI_REQUEST_TIMEOUT', '30'))

PROJECTION_HORIZON_DAYS = int(os.getenv('PROJECTION_HORIZON_DAYS', '30'))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

# Redis configuration (optional, for review queue snapshots)
REDIS_URL = os.getenv('REDIS_URL', '')
KV_ENABLED = bool(REDIS_URL)
REVIEW_SESSION_TTL = int(os.getenv('REVIEW_SESSION_TTL', '86400'))  # 1 day default


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and models for the extraction fallback chain.

    Each provider has one optional credential. An empty credential is a
    normal state: the provider is skipped when the chain runs.
    """

    groq_api_key: Optional[str] = None
    claude_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    groq_model: str = 'llama-3.3-70b-versatile'
    claude_model: str = 'claude-3-5-sonnet-20240620'
    gemini_model: str = 'gemini-1.5-flash'
    openai_model: str = 'gpt-4o'
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        return cls(
            groq_api_key=GROQ_API_KEY or None,
            claude_api_key=CLAUDE_API_KEY or None,
            gemini_api_key=GEMINI_API_KEY or None,
            openai_api_key=OPENAI_API_KEY or None,
            groq_model=GROQ_MODEL,
            claude_model=CLAUDE_MODEL,
            gemini_model=GEMINI_MODEL,
            openai_model=GPT_MODEL,
            timeout=AI_REQUEST_TIMEOUT,
        )
