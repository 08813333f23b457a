"""
Completion Client Module

Usage:
    from cardiochat.config import get_settings
    from cardiochat.llm import GeminiClient

    client = GeminiClient.from_settings(get_settings().gemini)
    payload = await client.generate(request)
"""

from cardiochat.llm.base import BaseCompletionClient
from cardiochat.llm.gemini import GeminiClient, extract_reply_text
from cardiochat.llm.models import (
    CompletionResult,
    Content,
    ContentPart,
    GenerateContentRequest,
    GenerationConfig,
    SafetySetting,
)

__all__ = [
    # Base classes
    "BaseCompletionClient",
    # Models
    "CompletionResult",
    "Content",
    "ContentPart",
    "GenerateContentRequest",
    "GenerationConfig",
    "SafetySetting",
    # Providers
    "GeminiClient",
    "extract_reply_text",
]
