"""
Base Completion Client

Abstract base class for completion service clients. The turn pipeline only
depends on this interface, so tests can substitute a fake.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from cardiochat.llm.models import GenerateContentRequest

logger = logging.getLogger(__name__)


class BaseCompletionClient(ABC):
    """
    Abstract base class for completion clients.

    Attributes:
        provider_name: Unique identifier for this provider
        model: Model identifier requests are sent to
        timeout: Request timeout in seconds
    """

    def __init__(self, provider_name: str, model: str, timeout: int = 30):
        self.provider_name = provider_name
        self.model = model
        self.timeout = timeout

        logger.info(
            f"Initialized {provider_name} client",
            extra={"provider": provider_name, "model": model, "timeout": timeout},
        )

    @abstractmethod
    async def generate(self, request: GenerateContentRequest) -> Any:
        """
        Send a request and return the decoded JSON response body.

        Raises:
            CompletionError: Transport, timeout, status, payload or config
                failure. Implementations must not raise anything else for
                an ordinary failed call.
        """
        pass  # pragma: no cover - abstract method

    async def aclose(self) -> None:
        """Release network resources."""
        return None

    def _log_request(self, request: GenerateContentRequest) -> None:
        """Log request details for debugging."""
        logger.debug(
            f"{self.provider_name} request",
            extra={
                "provider": self.provider_name,
                "model": self.model,
                "content_count": len(request.contents),
                "temperature": request.generation_config.temperature,
                "max_output_tokens": request.generation_config.max_output_tokens,
            },
        )

    def _log_response(self, status_code: int, latency_ms: float) -> None:
        """Log response details for debugging."""
        logger.debug(
            f"{self.provider_name} response",
            extra={
                "provider": self.provider_name,
                "model": self.model,
                "status_code": status_code,
                "latency_ms": round(latency_ms, 2),
            },
        )
