"""Request-scoped access to the services built at startup."""

from dataclasses import dataclass

from fastapi import Request

from lingo_tutor.api.middleware import bearer_token
from lingo_tutor.auth.service import AuthService
from lingo_tutor.auth.tokens import TokenManager
from lingo_tutor.config import Settings
from lingo_tutor.conversation.orchestrator import ConversationService
from lingo_tutor.conversation.practice import PracticeGenerator
from lingo_tutor.storage.users import UserStore


@dataclass
class Services:
    settings: Settings
    users: UserStore
    tokens: TokenManager
    auth: AuthService
    chat: ConversationService
    practice: PracticeGenerator


def get_services(request: Request) -> Services:
    return request.app.state.services


def current_user_id(request: Request) -> str:
    """User id established by the auth gate, verified here if the gate was bypassed."""
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        services = get_services(request)
        user_id = services.tokens.verify(bearer_token(request.headers.get("authorization")))
    return user_id
