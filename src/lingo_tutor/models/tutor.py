"""Structured replies expected from the language model."""

from typing import Annotated, Literal

from pydantic import Field, StringConstraints, field_validator

from lingo_tutor.models.common import CamelModel
from lingo_tutor.models.user import LanguageLevel


def _blank_if_none(value):
    return "" if value is None else value


class Correction(CamelModel):
    has_error: bool
    original: str = ""
    corrected: str = ""
    explanation: str = ""

    @field_validator("original", "corrected", "explanation", mode="before")
    @classmethod
    def none_to_blank(cls, value):
        return _blank_if_none(value)


class NewWord(CamelModel):
    word: str = Field(min_length=1)
    translation: str = ""
    example: str = ""

    @field_validator("translation", "example", mode="before")
    @classmethod
    def none_to_blank(cls, value):
        return _blank_if_none(value)


class TutorReply(CamelModel):
    """The JSON object the tutor must answer with."""

    response: str = Field(min_length=1)
    correction: Correction
    new_words: list[NewWord]
    cultural_note: str | None = None


class PronunciationFeedback(CamelModel):
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    specific_feedback: list[str] = Field(default_factory=list)


class PronunciationAnalysis(CamelModel):
    score: int = Field(ge=0, le=100)
    feedback: PronunciationFeedback = Field(default_factory=PronunciationFeedback)
    suggestions: list[str] = Field(default_factory=list)


class ExerciseQuestion(CamelModel):
    question: str
    options: list[str] = Field(default_factory=list)
    correct_answer: str
    explanation: str = ""


class Exercise(CamelModel):
    type: Literal["fill-in-blank", "multiple-choice", "sentence-correction"]
    instructions: str
    questions: list[ExerciseQuestion] = Field(min_length=1)


class GrammarPoint(CamelModel):
    name: str
    explanation: str
    examples: list[str] = Field(default_factory=list)


class GrammarExercise(CamelModel):
    exercise: Exercise
    grammar_point: GrammarPoint


class PronunciationRequest(CamelModel):
    text: str = Field(min_length=1)


class ExerciseRequest(CamelModel):
    topic: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    difficulty_level: LanguageLevel
