"""Tutor conversation endpoints."""

from fastapi import APIRouter, Depends, Query

from lingo_tutor.api.deps import Services, current_user_id, get_services
from lingo_tutor.errors import ValidationError
from lingo_tutor.models.conversation import ConversationRequest, Persona
from lingo_tutor.models.user import LanguageLevel

router = APIRouter(prefix="/api/conversations")


def parse_filter(enum_cls, value: str | None, field: str):
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            "Invalid input data",
            details=[{"loc": ["query", field], "msg": f"Must be one of: {allowed}"}],
        ) from None


@router.post("")
async def send_message(
    body: ConversationRequest,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    """Send one learner message and get the tutor's structured reply."""
    result = await services.chat.send_message(user_id, body)
    return {
        "conversation": result.conversation.to_api(),
        "aiResponse": result.reply.to_api(),
    }


@router.get("")
async def list_conversations(
    topic: str | None = None,
    difficulty_level: str | None = Query(default=None, alias="difficultyLevel"),
    ai_persona: str | None = Query(default=None, alias="aiPersona"),
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    """The caller's most recently updated conversations, optionally filtered."""
    conversations = services.chat.list_conversations(
        user_id,
        topic=topic or None,
        difficulty_level=parse_filter(LanguageLevel, difficulty_level, "difficultyLevel"),
        ai_persona=parse_filter(Persona, ai_persona, "aiPersona"),
    )
    return {"conversations": [c.to_api() for c in conversations]}
