"""Prompt template manager.

Loads and renders prompts from YAML files with Mako templating.
Each template carries its sampling temperature, a web search flag and an
optional system message; the model itself is chosen per task from the
application config.
"""

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from mako.template import Template
from pydantic import BaseModel, ConfigDict

from easynews.core.logging import get_logger

logger = get_logger(__name__)


class PromptType(str, Enum):
    """Available prompt types."""

    NEWS_CLASSIFICATION = "news_classification"
    SERIOUS_TOPICS = "serious_topics"
    SERIOUS_DIGEST = "serious_digest"
    LIFESTYLE_DIGEST = "lifestyle_digest"
    LIFESTYLE_FALLBACK = "lifestyle_fallback"


class LLMSettings(BaseModel):
    """LLM settings for a prompt template.

    Specified in each prompt YAML file.
    """

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.3
    web_search: bool = False


class PromptTemplate(BaseModel):
    """Prompt template metadata with LLM settings."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    description: str
    template: str
    system: str | None = None
    llm_settings: LLMSettings = LLMSettings()
    example_variables: dict[str, Any] = {}


class PromptManager:
    """Manages prompt templates with Mako rendering.

    Usage:
        >>> manager = PromptManager()
        >>> prompt = manager.render(
        ...     PromptType.NEWS_CLASSIFICATION,
        ...     title="Σεισμός 5.1 Ρίχτερ στην Κρήτη",
        ...     text="...",
        ...     categories=["serious", "sports"],
        ... )
    """

    def __init__(self, prompts_dir: Path | None = None):
        """Initialize prompt manager.

        Args:
            prompts_dir: Directory containing prompt YAML files
                        (defaults to easynews/prompts/templates/)
        """
        if prompts_dir is None:
            prompts_dir = Path(__file__).parent / "templates"

        self.prompts_dir = prompts_dir
        self._cache: dict[PromptType, PromptTemplate] = {}

        logger.debug("PromptManager initialized", prompts_dir=str(self.prompts_dir))

    def load(self, prompt_type: PromptType) -> PromptTemplate:
        """Load prompt template from YAML file.

        Args:
            prompt_type: Type of prompt to load

        Returns:
            PromptTemplate instance

        Raises:
            FileNotFoundError: If prompt file doesn't exist
            ValueError: If YAML is invalid
        """
        if prompt_type in self._cache:
            return self._cache[prompt_type]

        yaml_file = self.prompts_dir / f"{prompt_type.value}.yaml"

        if not yaml_file.exists():
            raise FileNotFoundError(
                f"Prompt file not found: {yaml_file}\n"
                f"Expected location: {self.prompts_dir}/{prompt_type.value}.yaml"
            )

        try:
            with open(yaml_file, encoding="utf-8") as f:
                data = yaml.safe_load(f)

            llm_settings = LLMSettings(
                temperature=data.get("temperature", 0.3),
                web_search=bool(data.get("web_search", False)),
            )

            template = PromptTemplate(
                name=data["name"],
                version=str(data["version"]),
                description=data["description"],
                template=data["template"],
                system=data.get("system"),
                llm_settings=llm_settings,
                example_variables=data.get("example_variables", {}),
            )

            self._cache[prompt_type] = template

            logger.debug(
                "Loaded prompt template",
                type=prompt_type.value,
                version=template.version,
                temperature=llm_settings.temperature,
                web_search=llm_settings.web_search,
            )

            return template

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_file}: {e}") from e
        except KeyError as e:
            raise ValueError(f"Missing required field in {yaml_file}: {e}") from e

    def render(self, prompt_type: PromptType, **variables: Any) -> str:
        """Render prompt template with variables.

        Args:
            prompt_type: Type of prompt to render
            **variables: Variables to inject into template

        Returns:
            Rendered prompt string

        Raises:
            FileNotFoundError: If prompt template doesn't exist
            ValueError: If template rendering fails
        """
        template_obj = self.load(prompt_type)
        return self._render_text(prompt_type, template_obj.template, variables)

    def render_system(self, prompt_type: PromptType, **variables: Any) -> str | None:
        """Render the template's system message, if it has one.

        Args:
            prompt_type: Type of prompt to render
            **variables: Variables to inject into the system message

        Returns:
            Rendered system message or None
        """
        template_obj = self.load(prompt_type)
        if not template_obj.system:
            return None
        return self._render_text(prompt_type, template_obj.system, variables)

    def build_messages(self, prompt_type: PromptType, **variables: Any) -> list[dict[str, str]]:
        """Render a template into chat messages (system first when present).

        Args:
            prompt_type: Type of prompt to render
            **variables: Variables shared by the system and user templates

        Returns:
            List of message dicts with 'role' and 'content'
        """
        messages = []
        system = self.render_system(prompt_type, **variables)
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": self.render(prompt_type, **variables)})
        return messages

    def get_llm_settings(self, prompt_type: PromptType) -> LLMSettings:
        """Get LLM settings for a prompt type.

        Args:
            prompt_type: Type of prompt

        Returns:
            LLMSettings with the sampling temperature and web search flag
        """
        template = self.load(prompt_type)
        return template.llm_settings

    def clear_cache(self) -> None:
        """Clear template cache."""
        self._cache.clear()
        logger.debug("Cleared prompt cache")

    def _render_text(self, prompt_type: PromptType, text: str, variables: dict[str, Any]) -> str:
        try:
            rendered = Template(text).render(**variables)

            logger.debug(
                "Rendered prompt",
                type=prompt_type.value,
                variables=list(variables.keys()),
            )

            return str(rendered).strip()

        except Exception as e:
            raise ValueError(f"Failed to render {prompt_type.value} template: {e}") from e


# Singleton instance
_prompt_manager: PromptManager | None = None


def get_prompt_manager() -> PromptManager:
    """Get singleton PromptManager instance.

    Returns:
        PromptManager instance
    """
    global _prompt_manager
    if _prompt_manager is None:
        _prompt_manager = PromptManager()
    return _prompt_manager


__all__ = [
    "LLMSettings",
    "PromptManager",
    "PromptTemplate",
    "PromptType",
    "get_prompt_manager",
]
