"""Conversation log persistence keyed by ConversationKey."""

import structlog

from lingo_tutor.models.conversation import Conversation, ConversationKey, Persona, Turn
from lingo_tutor.models.user import LanguageLevel
from lingo_tutor.storage.documents import DocumentStore

logger = structlog.get_logger()


class ConversationStore:
    def __init__(self, store: DocumentStore):
        self._conversations = store.collection("conversations")

    def get(self, key: ConversationKey) -> Conversation | None:
        data = self._conversations.load(key.document_id)
        if data is None:
            return None
        return Conversation.model_validate(data)

    def append_exchange(
        self,
        key: ConversationKey,
        turns: list[Turn],
        exchange_id: str,
        improvement_area: str | None = None,
    ) -> Conversation:
        """Append one exchange to the conversation for ``key``, creating it if needed.

        Replaying an ``exchange_id`` that is already in the log changes nothing.
        """
        with self._conversations.locked():
            conversation = self.get(key) or Conversation.for_key(key)
            if conversation.has_exchange(exchange_id):
                logger.info(
                    "exchange_already_recorded",
                    conversation_id=conversation.id,
                    exchange_id=exchange_id,
                )
                return conversation

            conversation.append_turns(
                [turn.model_copy(update={"exchange_id": exchange_id}) for turn in turns]
            )
            if improvement_area:
                conversation.add_improvement_area(improvement_area)
            self._conversations.save(conversation.id, conversation.model_dump(mode="json"))

        logger.info(
            "conversation_appended",
            conversation_id=conversation.id,
            turn_count=len(conversation.conversation_log),
        )
        return conversation

    def list_for_user(
        self,
        user_id: str,
        topic: str | None = None,
        difficulty_level: LanguageLevel | None = None,
        ai_persona: Persona | None = None,
        limit: int = 10,
    ) -> list[Conversation]:
        """Most recently updated conversations of one user, optionally filtered."""
        matches = []
        for data in self._conversations.iter_documents():
            if data.get("user_id") != user_id:
                continue
            conversation = Conversation.model_validate(data)
            if topic and conversation.topic != topic.strip():
                continue
            if difficulty_level and conversation.difficulty_level != difficulty_level:
                continue
            if ai_persona and conversation.ai_persona != ai_persona:
                continue
            matches.append(conversation)
        matches.sort(key=lambda c: c.updated_at, reverse=True)
        return matches[:limit]
