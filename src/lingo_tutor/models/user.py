"""Learner account, profile and progress models."""

import uuid
from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints, field_validator

from lingo_tutor.models.common import CamelModel, clean_tags, utcnow

SCORE_MIN = 0
SCORE_MAX = 100
GRAMMAR_STEP = 1
CONFIDENCE_STEP = 2

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)]
Language = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class LanguageLevel(StrEnum):
    """Learner proficiency levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def clamp_score(value: int) -> int:
    return max(SCORE_MIN, min(SCORE_MAX, value))


def normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class Progress(CamelModel):
    """Rolling skill scores, each kept within [0, 100]."""

    vocabulary_score: int = Field(default=0, ge=SCORE_MIN, le=SCORE_MAX)
    grammar_score: int = Field(default=0, ge=SCORE_MIN, le=SCORE_MAX)
    pronunciation_score: int = Field(default=0, ge=SCORE_MIN, le=SCORE_MAX)
    confidence_level: int = Field(default=0, ge=SCORE_MIN, le=SCORE_MAX)
    last_active: datetime = Field(default_factory=utcnow)

    def touch(self, at: datetime | None = None) -> None:
        self.last_active = at or utcnow()

    def record_turn(self, has_error: bool, at: datetime | None = None) -> None:
        """Nudge scores after one tutor exchange.

        A flagged correction counts as grammar practice; a clean turn builds
        confidence.
        """
        if has_error:
            self.grammar_score = clamp_score(self.grammar_score + GRAMMAR_STEP)
        else:
            self.confidence_level = clamp_score(self.confidence_level + CONFIDENCE_STEP)
        self.touch(at)


class User(CamelModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    email: EmailStr
    password_hash: str
    name: Name
    native_language: Language
    target_language: Language
    language_level: LanguageLevel = LanguageLevel.BEGINNER
    interests: list[str] = Field(default_factory=list)
    learning_goals: list[str] = Field(default_factory=list)
    progress: Progress = Field(default_factory=Progress)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, value):
        return normalize_email(value)

    @field_validator("interests", "learning_goals")
    @classmethod
    def clean_lists(cls, values: list[str]) -> list[str]:
        return clean_tags(values)

    def public_dict(self) -> dict:
        """Client-facing view; never includes the credential hash."""
        return self.to_api(exclude={"password_hash"})


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: Name
    native_language: Language
    target_language: Language
    language_level: LanguageLevel
    interests: list[str] | None = None
    learning_goals: list[str] | None = None

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, value):
        return normalize_email(value)


class SigninRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, value):
        return normalize_email(value)
