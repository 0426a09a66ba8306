"""Application factory: wires settings, stores and services into FastAPI."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from lingo_tutor.api import auth, conversations, practice, routes
from lingo_tutor.api.deps import Services
from lingo_tutor.api.errors import register_error_handlers
from lingo_tutor.api.middleware import install_auth_gate
from lingo_tutor.auth.service import AuthService
from lingo_tutor.auth.tokens import TokenManager
from lingo_tutor.config import Settings
from lingo_tutor.conversation.orchestrator import ConversationService
from lingo_tutor.conversation.practice import PracticeGenerator
from lingo_tutor.conversation.tutor import OpenAITutor, TutorResponder
from lingo_tutor.storage.conversations import ConversationStore
from lingo_tutor.storage.documents import DocumentStore
from lingo_tutor.storage.users import UserStore

logger = structlog.get_logger()


def build_services(
    settings: Settings,
    tutor: TutorResponder | None = None,
    practice_generator: PracticeGenerator | None = None,
) -> Services:
    """Construct every service from one Settings object."""
    store = DocumentStore(settings.db_dir)
    users = UserStore(store)
    conversation_store = ConversationStore(store)
    tokens = TokenManager(settings.jwt_secret, ttl=settings.token_ttl)
    if tutor is None:
        tutor = OpenAITutor(
            api_key=settings.openai_api_key,
            model=settings.chat_model,
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
            history_window=settings.history_window,
        )
    if practice_generator is None:
        practice_generator = PracticeGenerator(
            api_key=settings.openai_api_key,
            model=settings.chat_model,
        )
    return Services(
        settings=settings,
        users=users,
        tokens=tokens,
        auth=AuthService(users, tokens),
        chat=ConversationService(
            users,
            conversation_store,
            tutor,
            history_window=settings.history_window,
            list_limit=settings.conversation_list_limit,
        ),
        practice=practice_generator,
    )


def create_app(
    settings: Settings,
    tutor: TutorResponder | None = None,
    practice_generator: PracticeGenerator | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Process configuration, constructed once at startup.
        tutor: Reply generator override (tests inject a stub).
        practice_generator: Practice generator override.
    """
    services = build_services(settings, tutor, practice_generator)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info(
            "app_started",
            db_dir=str(settings.db_dir),
            chat_model=settings.chat_model,
            speech_enabled=bool(settings.elevenlabs_api_key),
        )
        yield
        for client in (services.chat.tutor, services.practice):
            close = getattr(client, "close", None)
            if close is not None:
                await close()
        logger.info("app_stopped")

    app = FastAPI(title="Lingo Tutor", version="0.1.0", lifespan=lifespan)
    app.state.services = services

    # Added last so CORS wraps the auth gate and preflights are answered.
    install_auth_gate(app, services.tokens)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(routes.router)
    app.include_router(auth.router)
    app.include_router(conversations.router)
    app.include_router(practice.router)

    # Mount frontend static files (must be after API routes)
    if settings.frontend_dir.exists():
        app.mount(
            "/", StaticFiles(directory=str(settings.frontend_dir), html=True), name="frontend"
        )
    return app
