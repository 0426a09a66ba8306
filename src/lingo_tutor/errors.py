"""Application error taxonomy mapped onto HTTP status codes."""

from typing import Any


class LingoTutorError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LingoTutorError):
    """Malformed or missing request fields."""

    status_code = 400

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.details = details or []


class DuplicateEmailError(ValidationError):
    def __init__(self) -> None:
        super().__init__("User already exists")


class AuthError(LingoTutorError):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = 401


class NotFoundError(LingoTutorError):
    status_code = 404


class UpstreamError(LingoTutorError):
    """The model provider call failed (transport, auth, quota)."""

    status_code = 500


class MalformedResponseError(LingoTutorError):
    """The model replied with something that is not the expected JSON object."""

    status_code = 500
