"""Prompt templates and loader."""

from cardiochat.prompts.loader import PromptLoader

__all__ = ["PromptLoader"]
