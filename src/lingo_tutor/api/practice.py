"""Pronunciation and grammar practice endpoints."""

from fastapi import APIRouter, Depends

from lingo_tutor.api.deps import Services, current_user_id, get_services
from lingo_tutor.errors import NotFoundError
from lingo_tutor.models.tutor import ExerciseRequest, PronunciationRequest
from lingo_tutor.models.user import User

router = APIRouter(prefix="/api")


def _load_user(services: Services, user_id: str) -> User:
    user = services.users.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.post("/pronunciation")
async def analyze_pronunciation(
    body: PronunciationRequest,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    user = _load_user(services, user_id)
    analysis = await services.practice.analyze_pronunciation(body.text, user.target_language)
    return analysis.to_api()


@router.post("/exercises")
async def grammar_exercise(
    body: ExerciseRequest,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    user = _load_user(services, user_id)
    exercise = await services.practice.grammar_exercise(user, body.topic, body.difficulty_level)
    return exercise.to_api()
