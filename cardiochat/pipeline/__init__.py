"""
Pipeline package for CardioChat.

Contains the turn pipeline and the orchestrator that owns session state.
"""

from cardiochat.pipeline.orchestrator import ChatOrchestrator, TurnOutcome, create_orchestrator
from cardiochat.pipeline.turns import (
    ERROR_TEXT,
    NO_RESPONSE_TEXT,
    QuestionCounter,
    TurnPipeline,
)

__all__ = [
    "ChatOrchestrator",
    "ERROR_TEXT",
    "NO_RESPONSE_TEXT",
    "QuestionCounter",
    "TurnOutcome",
    "TurnPipeline",
    "create_orchestrator",
]
