"""Prompt management system.

This module provides centralized prompt management with:
- Template-based prompts (Mako)
- Version control for prompts
- Per-template LLM settings
"""

from easynews.prompts.manager import PromptManager, PromptTemplate, PromptType

__all__ = ["PromptManager", "PromptTemplate", "PromptType"]
