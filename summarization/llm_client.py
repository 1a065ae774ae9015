"""
Summarization LLM Client

Module-specific LLM client for the summarization service.
Uses BaseLLMClient with summarization-specific configuration.
"""

from typing import Optional

from core import BaseLLMClient, LLMConfig
from .config import (
    SUMMARIZATION_API_KEY,
    SUMMARIZATION_API_BASE_URL,
    SUMMARIZATION_API_VERSION,
    SUMMARIZATION_REST_MODEL,
    SUMMARIZATION_TEMPERATURE,
    SUMMARIZATION_MAX_TOKENS,
    SUMMARIZATION_CONNECTION_TIMEOUT,
    SUMMARIZATION_CONNECTION_POOL_LIMIT,
)


def build_config() -> LLMConfig:
    """Module-specific configuration from environment settings."""
    return LLMConfig(
        api_key=SUMMARIZATION_API_KEY,
        api_base_url=SUMMARIZATION_API_BASE_URL,
        api_version=SUMMARIZATION_API_VERSION,
        model=SUMMARIZATION_REST_MODEL,
        temperature=SUMMARIZATION_TEMPERATURE,
        max_tokens=SUMMARIZATION_MAX_TOKENS,
        timeout=SUMMARIZATION_CONNECTION_TIMEOUT,
        pool_limit=SUMMARIZATION_CONNECTION_POOL_LIMIT,
        task_name="summarize"
    )


# Created lazily so importing the module never touches credentials
_client: Optional[BaseLLMClient] = None


def get_client() -> BaseLLMClient:
    """Get or create the summarization-specific client instance."""
    global _client
    if _client is None:
        _client = BaseLLMClient(build_config())
    return _client


async def close_session():
    """Close the summarization session. Call this on application shutdown."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
