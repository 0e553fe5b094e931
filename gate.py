"""Access gate: resolves the session cookie into an authenticated identity."""
from dataclasses import dataclass

from fastapi import Depends, Request

from auth import SessionIssuer
from config import Settings, get_settings
from errors import Unauthorized


@dataclass(frozen=True)
class Identity:
    user_id: str
    username: str


def get_session_issuer(settings: Settings = Depends(get_settings)) -> SessionIssuer:
    return SessionIssuer.from_settings(settings)


async def authenticate(
    request: Request,
    settings: Settings = Depends(get_settings),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Identity:
    """Return the caller's identity or raise Unauthorized (401).

    The identity is also stored on ``request.state.identity`` for handlers
    that read it from the request.
    """
    token = request.cookies.get(settings.cookie_name)
    if not token:
        raise Unauthorized("Unauthorized")

    claims = issuer.verify(token)
    if claims is None:
        raise Unauthorized("Invalid token")

    identity = Identity(user_id=claims.user_id, username=claims.username)
    request.state.identity = identity
    return identity
