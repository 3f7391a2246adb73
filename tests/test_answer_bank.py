"""Answer knowledge base"""

import pytest

from quickapply.data.answer_bank import AnswerKnowledgeBase, render_answer
from quickapply.errors import ConfigError


def test_render_answer():
    assert render_answer(True) == "Yes"
    assert render_answer(False) == "No"
    assert render_answer(5) == "5"
    assert render_answer(None) is None


def test_keys_are_normalized():
    kb = AnswerKnowledgeBase({"Years of Experience?": 5, "Empty": None})
    assert "years of experience" in kb
    assert len(kb) == 1


def test_fuzzy_lookup():
    kb = AnswerKnowledgeBase({"years of experience": 5, "email": "a@b.c"})
    assert kb.lookup("How many years of experience do you have?") == 5
    assert kb.lookup("Email") == "a@b.c"
    assert kb.lookup("Favorite color") is None


def test_answer_text_renders_bools():
    kb = AnswerKnowledgeBase({"are you authorized to work in the us": True})
    assert kb.answer_text("Are you authorized to work in the US?") == "Yes"


def test_from_file_flat_and_nested(tmp_path):
    flat = tmp_path / "flat.yaml"
    flat.write_text("email: a@b.c\nsalary: 100000\n", encoding="utf-8")
    nested = tmp_path / "nested.yaml"
    nested.write_text("answers:\n  email: a@b.c\n", encoding="utf-8")

    assert AnswerKnowledgeBase.from_file(flat).lookup("salary") == 100000
    assert AnswerKnowledgeBase.from_file(nested).lookup("email") == "a@b.c"


def test_from_file_errors(tmp_path):
    with pytest.raises(ConfigError):
        AnswerKnowledgeBase.from_file(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        AnswerKnowledgeBase.from_file(bad)
