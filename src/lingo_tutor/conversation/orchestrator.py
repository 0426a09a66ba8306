"""Conversation turn orchestration: context -> model -> log append -> progress."""

import uuid
from dataclasses import dataclass

import structlog

from lingo_tutor.conversation.feedback import derive_feedback, improvement_area
from lingo_tutor.conversation.prompts import build_system_prompt
from lingo_tutor.conversation.tutor import DEFAULT_HISTORY_WINDOW, TutorResponder
from lingo_tutor.errors import NotFoundError
from lingo_tutor.models.common import utcnow
from lingo_tutor.models.conversation import (
    Conversation,
    ConversationRequest,
    Persona,
    Role,
    Turn,
)
from lingo_tutor.models.tutor import TutorReply
from lingo_tutor.models.user import LanguageLevel, User
from lingo_tutor.storage.conversations import ConversationStore
from lingo_tutor.storage.users import UserStore

logger = structlog.get_logger()


@dataclass
class ExchangeResult:
    conversation: Conversation
    reply: TutorReply
    user: User


class ConversationService:
    """Runs one tutor exchange per call.

    Nothing is written unless the tutor reply was generated and parsed. The
    log append and the progress update are two separate writes.

    Args:
        users: User store.
        conversations: Conversation store.
        tutor: Reply generator.
        history_window: Prior turns handed to the tutor as context.
        list_limit: Maximum conversations returned by list_conversations.
    """

    def __init__(
        self,
        users: UserStore,
        conversations: ConversationStore,
        tutor: TutorResponder,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        list_limit: int = 10,
    ):
        self.users = users
        self.conversations = conversations
        self.tutor = tutor
        self.history_window = history_window
        self.list_limit = list_limit

    async def send_message(
        self,
        user_id: str,
        request: ConversationRequest,
    ) -> ExchangeResult:
        exchange_id = uuid.uuid4().hex
        log = logger.bind(user_id=user_id, exchange_id=exchange_id)

        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")

        key = request.key_for(user_id)
        existing = self.conversations.get(key)
        history = existing.recent_history(self.history_window) if existing else []

        system_prompt = build_system_prompt(
            user, key.topic, key.difficulty_level, key.ai_persona
        )
        user_turn = Turn(role=request.message.role, content=request.message.content)
        reply = await self.tutor.generate(system_prompt, history, request.message.content)

        assistant_turn = Turn(
            role=Role.ASSISTANT,
            content=reply.response,
            timestamp=utcnow(),
            feedback=derive_feedback(reply),
        )
        conversation = self.conversations.append_exchange(
            key,
            [user_turn, assistant_turn],
            exchange_id=exchange_id,
            improvement_area=improvement_area(reply),
        )

        has_error = reply.correction.has_error
        updated = self.users.record_turn(user_id, has_error)
        if updated is None:
            # The user vanished between the read and the progress write.
            log.warning("progress_update_skipped")
            updated = user

        log.info(
            "conversation_turn_recorded",
            conversation_id=conversation.id,
            has_error=has_error,
            history_turns=len(history),
        )
        return ExchangeResult(conversation=conversation, reply=reply, user=updated)

    def list_conversations(
        self,
        user_id: str,
        topic: str | None = None,
        difficulty_level: LanguageLevel | None = None,
        ai_persona: Persona | None = None,
    ) -> list[Conversation]:
        return self.conversations.list_for_user(
            user_id,
            topic=topic,
            difficulty_level=difficulty_level,
            ai_persona=ai_persona,
            limit=self.list_limit,
        )
