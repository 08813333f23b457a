"""Tests for completion request/result models."""

import pytest
from pydantic import ValidationError

from cardiochat.errors import CompletionTimeoutError
from cardiochat.llm.models import (
    CompletionResult,
    Content,
    GenerateContentRequest,
    GenerationConfig,
)


def test_generation_config_accepts_wire_aliases():
    config = GenerationConfig.model_validate(
        {"temperature": 0.2, "maxOutputTokens": 100, "topP": 0.5, "topK": 3}
    )

    assert config.max_output_tokens == 100
    assert config.top_k == 3


def test_generation_config_validates_bounds():
    with pytest.raises(ValidationError):
        GenerationConfig(temperature=3.0, max_output_tokens=100, top_p=0.5, top_k=3)


def test_request_requires_contents():
    with pytest.raises(ValidationError):
        GenerateContentRequest(
            contents=[],
            generation_config=GenerationConfig(
                temperature=0.7, max_output_tokens=800, top_p=0.8, top_k=10
            ),
        )


def test_content_rejects_unknown_roles():
    with pytest.raises(ValidationError):
        Content.text("assistant", "hello")


class TestCompletionResult:
    def test_ok_result(self):
        result = CompletionResult(status="ok", text="hi")

        assert result.succeeded
        assert result.error_cause is None

    def test_empty_result_counts_as_success(self):
        assert CompletionResult(status="empty").succeeded

    def test_error_result_exposes_cause(self):
        result = CompletionResult(status="error", error=CompletionTimeoutError("slow"))

        assert not result.succeeded
        assert result.error_cause == "timeout"
        assert result.error.to_dict()["cause"] == "timeout"
