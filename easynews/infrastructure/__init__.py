"""Infrastructure layer components.

This module provides infrastructure components such as the shared HTTP
client and the LLM client.
"""

from easynews.infrastructure.http_client import HTTPClient
from easynews.infrastructure.llm import LLMClient, LLMConfig, LLMError, LLMResponse

__all__ = ["HTTPClient", "LLMClient", "LLMConfig", "LLMError", "LLMResponse"]
