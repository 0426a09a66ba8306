"""User profile persistence."""

import hashlib
from collections.abc import Callable

import structlog

from lingo_tutor.errors import DuplicateEmailError
from lingo_tutor.models.common import utcnow
from lingo_tutor.models.user import Progress, User, normalize_email
from lingo_tutor.storage.documents import DocumentStore

logger = structlog.get_logger()


def _email_key(email: str) -> str:
    return hashlib.sha256(normalize_email(email).encode("utf-8")).hexdigest()


class UserStore:
    """Users keyed by id, plus a unique index on the normalized email."""

    def __init__(self, store: DocumentStore):
        self._users = store.collection("users")
        self._emails = store.collection("user_emails")

    def create(self, user: User) -> User:
        """Insert a new user. Raises DuplicateEmailError if the email is taken."""
        with self._users.locked():
            key = _email_key(user.email)
            if self._emails.exists(key):
                raise DuplicateEmailError()
            self._users.save(user.id, user.model_dump(mode="json"))
            self._emails.save(key, {"email": user.email, "user_id": user.id})
        logger.info("user_created", user_id=user.id)
        return user

    def get(self, user_id: str) -> User | None:
        try:
            data = self._users.load(user_id)
        except ValueError:
            return None
        if data is None:
            return None
        return User.model_validate(data)

    def get_by_email(self, email: str) -> User | None:
        entry = self._emails.load(_email_key(email))
        if entry is None:
            return None
        return self.get(entry["user_id"])

    def save(self, user: User) -> None:
        user.updated_at = utcnow()
        self._users.save(user.id, user.model_dump(mode="json"))

    def update_progress(self, user_id: str, change: Callable[[Progress], None]) -> User | None:
        """Apply ``change`` to the user's progress record and persist it."""
        with self._users.locked():
            user = self.get(user_id)
            if user is None:
                return None
            change(user.progress)
            self.save(user)
        return user

    def touch(self, user_id: str) -> User | None:
        """Refresh last_active."""
        return self.update_progress(user_id, lambda progress: progress.touch())

    def record_turn(self, user_id: str, has_error: bool) -> User | None:
        return self.update_progress(user_id, lambda progress: progress.record_turn(has_error))
