"""LLM client abstraction using LiteLLM.

This module provides a unified interface for LLM calls across different providers
(OpenAI, Anthropic, etc.) using LiteLLM as the backend, so the model behind
each prompt can be switched from its template without code changes.
"""

from dataclasses import dataclass
from typing import Any

import litellm
from litellm import acompletion

from easynews.core.config import get_config
from easynews.core.logging import get_logger

logger = get_logger(__name__)

# Drop unsupported params for each provider
litellm.drop_params = True

# Search depth requested when a task allows web search
WEB_SEARCH_CONTEXT_SIZE = "medium"


@dataclass
class LLMConfig:
    """LLM configuration for a specific use case.

    Attributes:
        model: Model identifier (e.g., "openai/gpt-4o-mini")
        max_tokens: Maximum tokens in response
        temperature: Sampling temperature (0-1)
        timeout: Request timeout in seconds
        web_search: Let the model search the web while answering
    """

    model: str
    max_tokens: int = 1000
    temperature: float = 0.7
    timeout: int = 60
    web_search: bool = False

    @classmethod
    def for_task(
        cls, temperature: float, heavy: bool = False, web_search: bool = False
    ) -> "LLMConfig":
        """Create config for a light (classification) or heavy (digest) task.

        Model and token limits come from the application config; the
        temperature comes from the prompt template.

        Args:
            temperature: Sampling temperature from the prompt template
            heavy: Use the heavy model instead of the light one
            web_search: Enable web search for the call

        Returns:
            LLMConfig instance
        """
        cfg = get_config()
        if heavy:
            return cls(
                model=cfg.llm_model_heavy,
                max_tokens=cfg.llm_model_heavy_max_tokens,
                temperature=temperature,
                timeout=cfg.llm_timeout_seconds,
                web_search=web_search,
            )
        return cls(
            model=cfg.llm_model_light,
            max_tokens=cfg.llm_model_light_max_tokens,
            temperature=temperature,
            timeout=cfg.llm_timeout_seconds,
            web_search=web_search,
        )


@dataclass
class LLMResponse:
    """Standardized LLM response.

    Attributes:
        content: Generated text content
        model: Model used for generation
        usage: Token usage statistics
        raw_response: Raw response from provider
    """

    content: str
    model: str
    usage: dict[str, int]
    raw_response: Any = None


class LLMError(Exception):
    """LLM operation failed."""

    pass


class LLMClient:
    """Unified LLM client using LiteLLM.

    Model naming convention:
        - OpenAI: "openai/gpt-4o-mini"
        - Anthropic: "anthropic/claude-3-5-haiku-20241022"

    Example:
        >>> client = LLMClient()
        >>> response = await client.complete(
        ...     config=LLMConfig(model="openai/gpt-4o-mini"),
        ...     messages=[{"role": "user", "content": "Γεια!"}]
        ... )
        >>> print(response.content)
    """

    def __init__(self) -> None:
        """Initialize LLM client with API keys from config."""
        config = get_config()
        if config.openai_api_key:
            litellm.openai_key = config.openai_api_key
        if config.anthropic_api_key:
            litellm.anthropic_key = config.anthropic_api_key

        logger.info("LLMClient initialized")

    async def complete(
        self,
        config: LLMConfig,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate completion from LLM.

        Args:
            config: LLM configuration
            messages: List of message dicts with 'role' and 'content'
            **kwargs: Additional parameters passed to the model

        Returns:
            LLMResponse with generated content

        Raises:
            LLMError: If generation fails
        """
        if config.web_search:
            kwargs.setdefault(
                "web_search_options", {"search_context_size": WEB_SEARCH_CONTEXT_SIZE}
            )

        try:
            logger.debug(
                "LLM request",
                model=config.model,
                max_tokens=config.max_tokens,
                web_search=config.web_search,
                message_count=len(messages),
            )

            response = await acompletion(
                model=config.model,
                messages=messages,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                timeout=config.timeout,
                **kwargs,
            )

            content = response.choices[0].message.content or ""

            usage = {}
            if response.usage:
                usage = {
                    "prompt_tokens": response.usage.prompt_tokens or 0,
                    "completion_tokens": response.usage.completion_tokens or 0,
                    "total_tokens": response.usage.total_tokens or 0,
                }

            logger.debug(
                "LLM response",
                model=response.model,
                content_length=len(content),
                usage=usage,
            )

            return LLMResponse(
                content=content,
                model=response.model or config.model,
                usage=usage,
                raw_response=response,
            )

        except Exception as e:
            logger.error(
                "LLM request failed",
                model=config.model,
                error=str(e),
            )
            raise LLMError(f"LLM request failed: {e}") from e


# Singleton instance
_llm_client: LLMClient | None = None


def get_llm_client() -> LLMClient:
    """Get singleton LLMClient instance.

    Returns:
        LLMClient instance
    """
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


__all__ = [
    "LLMClient",
    "LLMConfig",
    "LLMResponse",
    "LLMError",
    "WEB_SEARCH_CONTEXT_SIZE",
    "get_llm_client",
]
