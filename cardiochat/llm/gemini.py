"""
Gemini Completion Client

Implementation of BaseCompletionClient for Google's generateContent REST
endpoint, called directly over httpx.
"""

import logging
import time
from typing import Any

import httpx

from cardiochat.config import GeminiSettings
from cardiochat.errors import (
    CompletionConfigError,
    CompletionPayloadError,
    CompletionStatusError,
    CompletionTimeoutError,
    CompletionTransportError,
)
from cardiochat.llm.base import BaseCompletionClient
from cardiochat.llm.models import GenerateContentRequest

logger = logging.getLogger(__name__)


class GeminiClient(BaseCompletionClient):
    """
    Gemini generateContent client.

    Requests go to `{base_url}/{model}:generateContent?key={api_key}`. Every
    failure is raised as a CompletionError subclass.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
        timeout: int = 30,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Google AI API key (requests fail with a config error if unset)
            model: Model identifier (e.g., "gemini-2.0-flash")
            base_url: Base URL of the models collection
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx client (tests inject a MockTransport)
        """
        super().__init__(provider_name="gemini", model=model, timeout=timeout)

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=float(timeout))

        if not api_key:
            logger.warning("GEMINI_API_KEY is not set; completion requests will fail.")

    @classmethod
    def from_settings(cls, settings: GeminiSettings) -> "GeminiClient":
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    async def generate(self, request: GenerateContentRequest) -> Any:
        """Send a generateContent request and return the decoded JSON body."""
        if not self.api_key:
            raise CompletionConfigError("Gemini API key is not configured")

        self._log_request(request)
        started = time.perf_counter()
        try:
            response = await self.client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=request.to_payload(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise CompletionTimeoutError(
                f"Gemini request timed out after {self.timeout}s",
                context={"model": self.model},
            ) from e
        except httpx.HTTPError as e:
            raise CompletionTransportError(
                f"Gemini request failed: {type(e).__name__}",
                context={"model": self.model},
            ) from e

        latency_ms = (time.perf_counter() - started) * 1000
        self._log_response(response.status_code, latency_ms)

        if not response.is_success:
            raise CompletionStatusError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise CompletionPayloadError(
                "Gemini response body is not valid JSON",
                context={"model": self.model, "status_code": response.status_code},
            ) from e

    async def aclose(self) -> None:
        await self.client.aclose()


def extract_reply_text(payload: Any) -> str | None:
    """Return `candidates[0].content.parts[0].text`, or None when absent or empty."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text:
        return None
    return text
