"""Tests for display title derivation."""

from cardiochat.conversations.models import PLACEHOLDER_TITLE, Message
from cardiochat.conversations.titles import derive_title


def test_empty_history_yields_placeholder():
    assert derive_title([]) == PLACEHOLDER_TITLE


def test_assistant_only_history_yields_placeholder():
    assert derive_title([Message.assistant("Hello, how can I help?")]) == PLACEHOLDER_TITLE


def test_long_user_text_is_cut_to_thirty_characters():
    text = "X" * 50

    assert derive_title([Message.user(text)]) == "X" * 30


def test_cut_does_not_trim_or_respect_word_boundaries():
    text = "My heart races when I climb stairs quickly"

    assert derive_title([Message.user(text)]) == "My heart races when I climb st"


def test_short_text_is_kept_verbatim():
    assert derive_title([Message.user("I have chest pain")]) == "I have chest pain"


def test_first_user_message_wins():
    messages = [
        Message.assistant("Welcome"),
        Message.user("Palpitations at night"),
        Message.user("Also dizziness"),
    ]

    assert derive_title(messages) == "Palpitations at night"


def test_derivation_is_idempotent():
    messages = [Message.user("Shortness of breath while lying flat in bed")]

    first = derive_title(messages)
    second = derive_title(messages)

    assert first == second
    assert derive_title([Message.user(first)]) == first


def test_empty_user_text_falls_back_to_placeholder():
    assert derive_title([Message.user("")]) == PLACEHOLDER_TITLE
