"""Signed bearer tokens (HS256 JWT)."""

from datetime import datetime, timedelta

import jwt

from lingo_tutor.errors import AuthError
from lingo_tutor.models.common import utcnow

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(days=7)


def _micros(seconds: float) -> int:
    return round(seconds * 1_000_000)


class TokenManager:
    """Issues and verifies user tokens.

    Expiry is checked here against ``now`` rather than by PyJWT so callers
    can evaluate a token at any instant. ``iat`` and ``exp`` keep sub-second
    precision and are compared at microsecond resolution, so a token is
    rejected as soon as ``now`` passes ``exp``.

    Args:
        secret: HMAC signing secret.
        ttl: Token lifetime.
    """

    def __init__(self, secret: str, ttl: timedelta = DEFAULT_TTL):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.ttl = ttl

    def issue(self, user_id: str, now: datetime | None = None) -> str:
        issued_at = (now or utcnow()).timestamp()
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.ttl.total_seconds(),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str | None, now: datetime | None = None) -> str:
        """Return the user id carried by ``token``.

        Raises:
            AuthError: Missing, malformed, badly signed or expired token.
        """
        if not token:
            raise AuthError("Authentication required")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "iat", "exp"],
                },
            )
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid token") from exc

        if _micros((now or utcnow()).timestamp()) > _micros(float(payload["exp"])):
            raise AuthError("Token expired")
        return payload["sub"]
