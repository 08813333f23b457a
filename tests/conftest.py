"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging
from typing import Any

import pytest

from cardiochat.conversations.store import SessionStore
from cardiochat.llm.base import BaseCompletionClient
from cardiochat.llm.models import GenerateContentRequest, GenerationConfig, SafetySetting
from cardiochat.pipeline.orchestrator import ChatOrchestrator
from cardiochat.pipeline.turns import QuestionCounter, TurnPipeline
from cardiochat.storage.memory import InMemoryKeyValueStore

SYSTEM_INSTRUCTION = "You are a cardiologist AI expert."

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires a Gemini API key)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (may require external services)"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled (use --run-integration to enable)."
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """
    Configure logging for tests.

    Sets up log capture and undoes logger levels the CLI may have raised.
    This fixture runs automatically for all tests.
    """
    caplog.set_level(logging.DEBUG)
    yield
    for name in ("cardiochat", "httpx"):
        logging.getLogger(name).setLevel(logging.NOTSET)


# ============================================================================
# Fakes
# ============================================================================


def _gemini_reply(text: str) -> dict[str, Any]:
    """Successful generateContent body carrying one text part."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def gemini_reply():
    return _gemini_reply


class FakeCompletionClient(BaseCompletionClient):
    """Returns queued payloads (or raises queued exceptions) in order."""

    def __init__(self, responses: list[Any] | None = None):
        super().__init__(provider_name="fake", model="fake-model")
        self.responses = list(responses or [])
        self.requests: list[GenerateContentRequest] = []
        self.closed = False

    async def generate(self, request: GenerateContentRequest) -> Any:
        self.requests.append(request)
        item = self.responses.pop(0) if self.responses else {}
        if isinstance(item, BaseException):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def generation_config() -> GenerationConfig:
    return GenerationConfig(temperature=0.7, max_output_tokens=800, top_p=0.8, top_k=10)


@pytest.fixture
def pipeline(fake_client, generation_config) -> TurnPipeline:
    return TurnPipeline(
        client=fake_client,
        system_instruction=SYSTEM_INSTRUCTION,
        generation_config=generation_config,
        safety_settings=[
            SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH")
        ],
        counter=QuestionCounter(6),
    )


@pytest.fixture
def memory_backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def session_store(memory_backend) -> SessionStore:
    return SessionStore(memory_backend)


@pytest.fixture
def orchestrator(session_store, pipeline) -> ChatOrchestrator:
    """Orchestrator over an empty in-memory store (default state)."""
    return ChatOrchestrator(session_store=session_store, pipeline=pipeline)
