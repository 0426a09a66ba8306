"""Signup and signin."""

import structlog

from lingo_tutor.auth.passwords import hash_password, verify_password
from lingo_tutor.auth.tokens import TokenManager
from lingo_tutor.errors import AuthError
from lingo_tutor.models.user import SigninRequest, SignupRequest, User
from lingo_tutor.storage.users import UserStore

logger = structlog.get_logger()


class AuthService:
    def __init__(self, users: UserStore, tokens: TokenManager):
        self.users = users
        self.tokens = tokens

    def signup(self, request: SignupRequest) -> tuple[User, str]:
        """Create an account and return it with a fresh token.

        Raises:
            DuplicateEmailError: The email is already registered.
        """
        user = User(
            email=request.email,
            password_hash=hash_password(request.password),
            name=request.name,
            native_language=request.native_language,
            target_language=request.target_language,
            language_level=request.language_level,
            interests=request.interests or [],
            learning_goals=request.learning_goals or [],
        )
        self.users.create(user)
        logger.info("user_signed_up", user_id=user.id)
        return user, self.tokens.issue(user.id)

    def signin(self, request: SigninRequest) -> tuple[User, str]:
        """Check credentials, refresh last_active and issue a token.

        Raises:
            AuthError: Unknown email or wrong password.
        """
        user = self.users.get_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.info("signin_rejected")
            raise AuthError("Invalid credentials")

        user = self.users.touch(user.id) or user
        logger.info("user_signed_in", user_id=user.id)
        return user, self.tokens.issue(user.id)
