import pytest

from cardiochat.prompts.loader import PromptLoader, split_front_matter


def test_prompt_loader_strips_front_matter():
    loader = PromptLoader()
    content = loader.load("system/cardiologist.md")
    assert not content.startswith("---")
    assert content.startswith("You are a cardiologist AI expert.")


def test_prompt_loader_renders_question_count():
    loader = PromptLoader()
    rendered = loader.render("system/cardiologist.md", max_questions=6)
    assert "Ask 6 follow-up questions" in rendered
    assert "{{" not in rendered
    assert "urgent cardiologist consultation" in rendered


def test_prompt_loader_requires_template_variables():
    loader = PromptLoader()
    with pytest.raises(Exception, match="max_questions"):
        loader.render("system/cardiologist.md")


def test_prompt_loader_metadata():
    metadata = PromptLoader().get_metadata("system/cardiologist.md")
    assert metadata["name"] == "cardiologist"
    assert metadata["variables"] == ["max_questions"]


def test_prompt_loader_missing_prompt():
    loader = PromptLoader()
    with pytest.raises(FileNotFoundError):
        loader.load("system/missing.md")
    with pytest.raises(FileNotFoundError):
        loader.render("system/missing.md")


def test_prompt_loader_custom_directory(tmp_path):
    (tmp_path / "system").mkdir()
    (tmp_path / "system" / "short.md").write_text(
        "---\nname: short\n---\nAsk {{ max_questions }} questions.\n", encoding="utf-8"
    )
    loader = PromptLoader(tmp_path)
    assert loader.render("system/short.md", max_questions=2) == "Ask 2 questions."


def test_split_front_matter_without_header():
    assert split_front_matter("plain body") == ({}, "plain body")
