"""Route gating: bearer tokens for API paths, cookie tokens for pages."""

from urllib.parse import urlencode

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from lingo_tutor.auth.tokens import TokenManager
from lingo_tutor.errors import AuthError

logger = structlog.get_logger()

PUBLIC_PATHS = frozenset({"/", "/signin", "/signup", "/about", "/api/health"})
PUBLIC_PREFIXES = ("/api/auth/", "/static/")
TOKEN_COOKIE = "token"
SIGNIN_PATH = "/signin"


def is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def is_api(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


def bearer_token(header_value: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header_value:
        return None
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def install_auth_gate(app: FastAPI, tokens: TokenManager) -> None:
    """Register the middleware that rejects unauthenticated requests.

    API paths answer 401 JSON. Page paths redirect to the signin page; a
    cookie that fails verification is cleared on the way.
    """

    @app.middleware("http")
    async def auth_gate(request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or is_public(path):
            return await call_next(request)

        if is_api(path):
            try:
                request.state.user_id = tokens.verify(
                    bearer_token(request.headers.get("authorization"))
                )
            except AuthError as exc:
                logger.info("api_request_unauthorized", path=path, reason=exc.message)
                return JSONResponse({"error": exc.message}, status_code=401)
            return await call_next(request)

        cookie = request.cookies.get(TOKEN_COOKIE)
        if not cookie:
            return RedirectResponse(f"{SIGNIN_PATH}?{urlencode({'from': path})}")
        try:
            request.state.user_id = tokens.verify(cookie)
        except AuthError:
            response = RedirectResponse(SIGNIN_PATH)
            response.delete_cookie(TOKEN_COOKIE)
            return response
        return await call_next(request)
