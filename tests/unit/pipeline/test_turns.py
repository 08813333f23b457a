"""
Tests for the turn pipeline.

Covers request assembly, reply extraction, fallback replies, and the
question counter, with a fake completion client.
"""

import pytest

from cardiochat.conversations.models import Conversation, Message, Sender, SessionState
from cardiochat.errors import CompletionStatusError, CompletionTransportError
from cardiochat.pipeline.turns import ERROR_TEXT, NO_RESPONSE_TEXT, QuestionCounter


class TestQuestionCounter:
    def test_increments_and_saturates(self):
        counter = QuestionCounter(maximum=2)

        assert counter.increment() == 1
        assert counter.increment() == 2
        assert counter.increment() == 2
        assert counter.exhausted

    def test_reset(self):
        counter = QuestionCounter()
        counter.increment()

        counter.reset()

        assert counter.value == 0

    def test_rejects_negative_maximum(self):
        with pytest.raises(ValueError):
            QuestionCounter(maximum=-1)


class TestBuildRequest:
    def test_system_instruction_precedes_history(self, pipeline):
        conversation = Conversation(
            id=1,
            messages=(
                Message.user("I have chest pain"),
                Message.assistant("Can you describe the pain?"),
                Message.user("Sharp, on the left side"),
            ),
        )

        request = pipeline.build_request(conversation)

        assert [(c.role, c.parts[0].text) for c in request.contents] == [
            ("user", "You are a cardiologist AI expert."),
            ("user", "I have chest pain"),
            ("model", "Can you describe the pain?"),
            ("user", "Sharp, on the left side"),
        ]
        assert all(len(c.parts) == 1 for c in request.contents)

    def test_carries_configured_parameters(self, pipeline):
        request = pipeline.build_request(Conversation(id=1))
        payload = request.to_payload()

        assert payload["generationConfig"] == {
            "temperature": 0.7,
            "maxOutputTokens": 800,
            "topP": 0.8,
            "topK": 10,
        }
        assert payload["safetySettings"] == [
            {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"}
        ]


class TestSendTurn:
    @pytest.mark.asyncio
    async def test_successful_turn_appends_user_and_reply(self, pipeline, fake_client, gemini_reply):
        fake_client.responses.append(gemini_reply("Can you describe the pain?"))

        state = await pipeline.send_turn(SessionState.default(), 1, "I have chest pain")

        conversation = state.get(1)
        assert conversation.title == "I have chest pain"
        assert [(m.sender, m.text) for m in conversation.messages] == [
            (Sender.USER, "I have chest pain"),
            (Sender.ASSISTANT, "Can you describe the pain?"),
        ]
        assert pipeline.counter.value == 1

    @pytest.mark.asyncio
    async def test_request_includes_new_user_message(self, pipeline, fake_client, gemini_reply):
        fake_client.responses.append(gemini_reply("ok"))

        await pipeline.send_turn(SessionState.default(), 1, "I have chest pain")

        sent = fake_client.requests[0]
        assert sent.contents[-1].role == "user"
        assert sent.contents[-1].parts[0].text == "I have chest pain"

    @pytest.mark.asyncio
    async def test_empty_response_becomes_no_response(self, pipeline, fake_client):
        fake_client.responses.append({"candidates": []})

        state = await pipeline.send_turn(SessionState.default(), 1, "Hello")

        assert state.get(1).messages[-1] == Message.assistant(NO_RESPONSE_TEXT)
        assert pipeline.counter.value == 1

    @pytest.mark.asyncio
    async def test_transport_failure_keeps_user_message(self, pipeline, fake_client):
        fake_client.responses.append(CompletionTransportError("connection refused"))

        state = await pipeline.send_turn(SessionState.default(), 1, "I have chest pain")

        assert [m.text for m in state.get(1).messages] == ["I have chest pain", ERROR_TEXT]
        assert state.get(1).messages[-1].sender == Sender.ASSISTANT
        assert pipeline.counter.value == 0

    @pytest.mark.asyncio
    async def test_status_failure_is_logged_with_cause(self, pipeline, fake_client, caplog):
        fake_client.responses.append(CompletionStatusError(500, "boom"))

        state = await pipeline.send_turn(SessionState.default(), 1, "Hi")

        assert state.get(1).messages[-1].text == ERROR_TEXT
        failures = [r for r in caplog.records if r.getMessage().startswith("Completion failed")]
        assert failures and failures[0].cause == "status"

    @pytest.mark.asyncio
    async def test_unexpected_client_exception_is_contained(self, pipeline, fake_client):
        fake_client.responses.append(RuntimeError("bug in client"))

        state = await pipeline.send_turn(SessionState.default(), 1, "Hi")

        assert state.get(1).messages[-1].text == ERROR_TEXT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_is_a_no_op(self, pipeline, fake_client, text):
        state = SessionState.default()

        result = await pipeline.send_turn(state, 1, text)

        assert result is state
        assert fake_client.requests == []

    @pytest.mark.asyncio
    async def test_unknown_conversation_is_a_no_op(self, pipeline, fake_client):
        state = SessionState.default()

        result = await pipeline.send_turn(state, 99, "Hello")

        assert result is state
        assert fake_client.requests == []

    @pytest.mark.asyncio
    async def test_counter_saturates_at_maximum(self, pipeline, fake_client, gemini_reply):
        state = SessionState.default()
        for i in range(8):
            fake_client.responses.append(gemini_reply(f"question {i}"))
            state = await pipeline.send_turn(state, 1, f"answer {i}")

        assert pipeline.counter.value == 6
        assert len(state.get(1).messages) == 16
