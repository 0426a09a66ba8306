"""Conversation log models."""

import hashlib
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from lingo_tutor.models.common import CamelModel, utcnow
from lingo_tutor.models.user import LanguageLevel

Topic = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class Persona(StrEnum):
    """AI tutor behaviour profiles."""

    TEACHER = "teacher"
    CONVERSATION_PARTNER = "conversation_partner"
    GRAMMAR_EXPERT = "grammar_expert"
    PRONUNCIATION_COACH = "pronunciation_coach"

    @property
    def role_title(self) -> str:
        return self.value.replace("_", " ")


class Feedback(CamelModel):
    """Per-turn scoring attached to assistant turns."""

    accuracy: int = Field(ge=0, le=100)
    issues: list[str] = Field(default_factory=list)
    positives: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)


class Turn(CamelModel):
    """A single message in the conversation log."""

    role: Role
    content: str = Field(min_length=1)
    timestamp: datetime = Field(default_factory=utcnow)
    feedback: Feedback | None = None
    exchange_id: str | None = None


class ConversationKey(BaseModel):
    """Composite identity of a conversation: one document per tuple."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    topic: Topic
    difficulty_level: LanguageLevel
    ai_persona: Persona

    @property
    def document_id(self) -> str:
        raw = "\x1f".join(
            [self.user_id, self.topic, self.difficulty_level.value, self.ai_persona.value]
        )
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:32]


class Conversation(CamelModel):
    """Append-only conversation log for one (user, topic, level, persona)."""

    id: str
    user_id: str
    topic: str
    difficulty_level: LanguageLevel
    ai_persona: Persona
    conversation_log: list[Turn] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def for_key(cls, key: ConversationKey) -> "Conversation":
        return cls(
            id=key.document_id,
            user_id=key.user_id,
            topic=key.topic,
            difficulty_level=key.difficulty_level,
            ai_persona=key.ai_persona,
        )

    @property
    def key(self) -> ConversationKey:
        return ConversationKey(
            user_id=self.user_id,
            topic=self.topic,
            difficulty_level=self.difficulty_level,
            ai_persona=self.ai_persona,
        )

    def has_exchange(self, exchange_id: str) -> bool:
        return any(turn.exchange_id == exchange_id for turn in self.conversation_log)

    def append_turns(self, turns: list[Turn]) -> None:
        """Append turns, keeping timestamps strictly increasing."""
        for turn in turns:
            if self.conversation_log:
                last = self.conversation_log[-1].timestamp
                if turn.timestamp <= last:
                    turn = turn.model_copy(update={"timestamp": last + timedelta(microseconds=1)})
            self.conversation_log.append(turn)
        if turns:
            self.updated_at = utcnow()

    def add_improvement_area(self, area: str) -> bool:
        """Record an improvement area once. Returns True when it was new."""
        area = area.strip()
        if not area or area in self.improvement_areas:
            return False
        self.improvement_areas.append(area)
        return True

    def recent_history(self, limit: int) -> list[dict[str, str]]:
        """Last ``limit`` turns as chat messages, oldest first."""
        if limit <= 0:
            return []
        return [
            {"role": turn.role.value, "content": turn.content}
            for turn in self.conversation_log[-limit:]
        ]


class MessageIn(CamelModel):
    content: str = Field(min_length=1)
    role: Role


class ConversationRequest(CamelModel):
    topic: Topic
    difficulty_level: LanguageLevel
    ai_persona: Persona
    message: MessageIn

    def key_for(self, user_id: str) -> ConversationKey:
        return ConversationKey(
            user_id=user_id,
            topic=self.topic,
            difficulty_level=self.difficulty_level,
            ai_persona=self.ai_persona,
        )
