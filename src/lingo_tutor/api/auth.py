"""Signup and signin endpoints."""

from fastapi import APIRouter, Depends, Response

from lingo_tutor.api.deps import Services, get_services
from lingo_tutor.api.middleware import TOKEN_COOKIE
from lingo_tutor.models.user import SigninRequest, SignupRequest, User

router = APIRouter(prefix="/api/auth")


def _session_payload(response: Response, services: Services, user: User, token: str) -> dict:
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=int(services.tokens.ttl.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    return {"user": user.public_dict(), "token": token}


@router.post("/signup", status_code=201)
def signup(
    body: SignupRequest,
    response: Response,
    services: Services = Depends(get_services),
) -> dict:
    """Create an account; 400 on invalid input or an already registered email."""
    user, token = services.auth.signup(body)
    return _session_payload(response, services, user, token)


@router.post("/signin")
def signin(
    body: SigninRequest,
    response: Response,
    services: Services = Depends(get_services),
) -> dict:
    """Exchange email and password for a token; 401 on bad credentials."""
    user, token = services.auth.signin(body)
    return _session_payload(response, services, user, token)
