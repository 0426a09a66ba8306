"""Tests for the tutor system prompt."""

from lingo_tutor.conversation.prompts import build_system_prompt
from lingo_tutor.models.conversation import Persona
from lingo_tutor.models.user import LanguageLevel, User


def make_user(**overrides) -> User:
    fields = {
        "email": "ana@example.com",
        "password_hash": "x",
        "name": "Ana",
        "native_language": "English",
        "target_language": "Spanish",
        "interests": ["music", "football"],
        "learning_goals": ["travel to Mexico", "read novels"],
    }
    fields.update(overrides)
    return User(**fields)


def test_names_persona_level_and_language():
    prompt = build_system_prompt(
        make_user(), "food", LanguageLevel.INTERMEDIATE, Persona.CONVERSATION_PARTNER
    )
    assert prompt.startswith(
        "You are a conversation partner helping a intermediate level student learn Spanish."
    )


def test_lists_profile_verbatim():
    prompt = build_system_prompt(make_user(), "food", LanguageLevel.BEGINNER, Persona.TEACHER)
    assert "Their native language is English." in prompt
    assert "Their interests include: music, football." in prompt
    assert "Their learning goals are: travel to Mexico, read novels." in prompt


def test_guidelines_and_correction_template():
    prompt = build_system_prompt(make_user(), "food", LanguageLevel.BEGINNER, Persona.TEACHER)
    assert "the topic: food" in prompt
    assert "Good try! Instead of '[wrong]' you can say '[correct]'. It means [explanation]." in prompt
    assert "2-3 new words" in prompt
    assert "cultural context" in prompt
    for number in range(1, 8):
        assert f"\n{number}. " in prompt
    assert "\n8. " not in prompt


def test_language_policy():
    prompt = build_system_prompt(make_user(), "food", LanguageLevel.BEGINNER, Persona.TEACHER)
    assert "Always respond in Spanish, but explain difficult concepts in English if needed." in prompt


def test_json_output_directive():
    prompt = build_system_prompt(make_user(), "food", LanguageLevel.BEGINNER, Persona.TEACHER)
    for field in ('"response"', '"correction"', '"hasError"', '"original"', '"corrected"',
                  '"explanation"', '"newWords"', '"word"', '"translation"', '"example"',
                  '"culturalNote"'):
        assert field in prompt
    assert prompt.index("Guidelines:") < prompt.index('"response"')


def test_empty_lists_have_placeholder():
    prompt = build_system_prompt(
        make_user(interests=[], learning_goals=[]), "food", LanguageLevel.BEGINNER, Persona.TEACHER
    )
    assert "Their interests include: none specified." in prompt


def test_pure_function():
    user = make_user()
    first = build_system_prompt(user, "food", LanguageLevel.BEGINNER, Persona.GRAMMAR_EXPERT)
    second = build_system_prompt(user, "food", LanguageLevel.BEGINNER, Persona.GRAMMAR_EXPERT)
    assert first == second
    assert "You are a grammar expert" in first
