"""Tests for ConversationService with a stub tutor."""

import pytest

from lingo_tutor.conversation.orchestrator import ConversationService
from lingo_tutor.errors import MalformedResponseError, NotFoundError, UpstreamError
from lingo_tutor.models.conversation import ConversationRequest, Persona
from lingo_tutor.models.user import LanguageLevel, User


@pytest.fixture
def user(user_store):
    return user_store.create(
        User(
            email="ana@example.com",
            password_hash="hashed",
            name="Ana",
            native_language="English",
            target_language="Spanish",
            interests=["music"],
            learning_goals=["travel"],
        )
    )


@pytest.fixture
def service(user_store, conversation_store, stub_tutor):
    return ConversationService(user_store, conversation_store, stub_tutor)


def make_request(content: str = "Hola", topic: str = "food") -> ConversationRequest:
    return ConversationRequest.model_validate({
        "topic": topic,
        "difficultyLevel": "beginner",
        "aiPersona": "teacher",
        "message": {"content": content, "role": "user"},
    })


class TestSendMessage:
    async def test_clean_turn(self, service, user, user_store, stub_tutor, clean_reply):
        stub_tutor.queue(clean_reply)
        result = await service.send_message(user.id, make_request())

        log = result.conversation.conversation_log
        assert [t.role.value for t in log] == ["user", "assistant"]
        assert log[0].content == "Hola"
        assert log[0].feedback is None
        assert log[1].content == "Hola"
        assert log[1].feedback.model_dump() == {
            "accuracy": 100, "issues": [], "positives": ["Perfect!"], "tips": [],
        }
        progress = user_store.get(user.id).progress
        assert progress.confidence_level == 2
        assert progress.grammar_score == 0

    async def test_error_turn(self, service, user, user_store, stub_tutor, error_reply):
        stub_tutor.queue(error_reply)
        result = await service.send_message(user.id, make_request("Yo estoy estudiante"))

        feedback = result.conversation.conversation_log[1].feedback
        assert feedback.accuracy == 80
        assert feedback.issues == ["use 'ser' not 'estar'"]
        assert feedback.positives == ["Good attempt!"]
        assert result.conversation.improvement_areas == ["use 'ser' not 'estar'"]
        assert user_store.get(user.id).progress.grammar_score == 1

    async def test_identical_messages_are_separate_exchanges(
        self, service, user, user_store, stub_tutor
    ):
        await service.send_message(user.id, make_request())
        result = await service.send_message(user.id, make_request())

        log = result.conversation.conversation_log
        assert len(log) == 4
        assert log[0].exchange_id == log[1].exchange_id
        assert log[2].exchange_id == log[3].exchange_id
        assert log[0].exchange_id != log[2].exchange_id
        assert len(stub_tutor.calls) == 2
        assert user_store.get(user.id).progress.confidence_level == 4

    async def test_improvement_area_added_once(self, service, user, stub_tutor, error_reply):
        stub_tutor.queue(error_reply, error_reply, error_reply)
        for _ in range(3):
            result = await service.send_message(user.id, make_request())
        assert result.conversation.improvement_areas == ["use 'ser' not 'estar'"]
        assert len(result.conversation.conversation_log) == 6

    async def test_prompt_and_context(self, service, user, stub_tutor):
        for i in range(4):
            await service.send_message(user.id, make_request(f"msg {i}"))

        first, last = stub_tutor.calls[0], stub_tutor.calls[-1]
        assert first["history"] == []
        assert "You are a teacher helping a beginner level student learn Spanish." in (
            first["system_prompt"]
        )
        assert last["message"] == "msg 3"
        assert len(last["history"]) == 5
        assert last["history"][-1]["role"] == "assistant"
        assert last["history"][0] == {"role": "assistant", "content": "Hola"}

    async def test_unknown_user(self, service, stub_tutor):
        with pytest.raises(NotFoundError):
            await service.send_message("0" * 32, make_request())
        assert stub_tutor.calls == []

    @pytest.mark.parametrize(
        "failure",
        [UpstreamError("down"), MalformedResponseError("bad json")],
    )
    async def test_generation_failure_writes_nothing(
        self, service, user, user_store, conversation_store, stub_tutor, failure
    ):
        stub_tutor.queue(failure)
        with pytest.raises(type(failure)):
            await service.send_message(user.id, make_request())

        assert conversation_store.get(make_request().key_for(user.id)) is None
        assert user_store.get(user.id).progress == user.progress

    async def test_failure_after_existing_turns_leaves_log_untouched(
        self, service, user, conversation_store, stub_tutor
    ):
        await service.send_message(user.id, make_request("uno"))
        stub_tutor.queue(UpstreamError("down"))
        with pytest.raises(UpstreamError):
            await service.send_message(user.id, make_request("dos"))
        log = conversation_store.get(make_request().key_for(user.id)).conversation_log
        assert [t.content for t in log] == ["uno", "Hola"]

    async def test_grammar_capped_at_100(self, service, user, user_store, stub_tutor, error_reply):
        user_store.update_progress(user.id, lambda p: setattr(p, "grammar_score", 99))
        stub_tutor.queue(error_reply, error_reply, error_reply)
        for _ in range(3):
            await service.send_message(user.id, make_request())
        assert user_store.get(user.id).progress.grammar_score == 100


class TestListConversations:
    async def test_filters_and_limit(self, service, user, stub_tutor):
        for i in range(11):
            await service.send_message(user.id, make_request(topic=f"t{i}"))

        listed = service.list_conversations(user.id)
        assert len(listed) == 10
        assert listed[0].topic == "t10"
        assert [c.topic for c in service.list_conversations(user.id, topic="t3")] == ["t3"]
        assert service.list_conversations(user.id, ai_persona=Persona.GRAMMAR_EXPERT) == []
        assert len(
            service.list_conversations(user.id, difficulty_level=LanguageLevel.BEGINNER)
        ) == 10
