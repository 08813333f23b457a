"""
Completion Request and Response Models

Pydantic models for the Gemini generateContent wire format plus the
provider-agnostic CompletionResult handed back to the turn pipeline.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from cardiochat.errors import CompletionError


class ContentPart(BaseModel):
    """Single text part of a content entry."""

    text: str = Field(..., description="Literal text")


class Content(BaseModel):
    """One entry of the request history."""

    role: Literal["user", "model"] = Field(..., description="Gemini role")
    parts: list[ContentPart] = Field(..., min_length=1, description="Content parts")

    @classmethod
    def text(cls, role: Literal["user", "model"], text: str) -> "Content":
        return cls(role=role, parts=[ContentPart(text=text)])


class GenerationConfig(BaseModel):
    """Sampling parameters."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: float = Field(..., ge=0.0, le=2.0)
    max_output_tokens: int = Field(..., gt=0, alias="maxOutputTokens")
    top_p: float = Field(..., ge=0.0, le=1.0, alias="topP")
    top_k: int = Field(..., gt=0, alias="topK")


class SafetySetting(BaseModel):
    category: str
    threshold: str


class GenerateContentRequest(BaseModel):
    """Body of a generateContent call."""

    model_config = ConfigDict(populate_by_name=True)

    contents: list[Content] = Field(..., min_length=1, description="Request history")
    generation_config: GenerationConfig = Field(..., alias="generationConfig")
    safety_settings: list[SafetySetting] = Field(
        default_factory=list, alias="safetySettings"
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the camelCase keys the service expects."""
        return self.model_dump(by_alias=True)


class CompletionResult(BaseModel):
    """
    Outcome of one completion call.

    status:
        ok     - the service returned usable text
        empty  - the call succeeded but carried no usable text
        error  - the call failed; `error` holds the typed cause
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: Literal["ok", "empty", "error"] = Field(..., description="Outcome kind")
    text: Optional[str] = Field(None, description="Reply text when status is ok")
    error: Optional[CompletionError] = Field(None, description="Failure when status is error")
    latency_ms: Optional[float] = Field(None, ge=0.0, description="Call duration")

    @property
    def succeeded(self) -> bool:
        return self.status != "error"

    @property
    def error_cause(self) -> Optional[str]:
        return self.error.cause if self.error is not None else None
