import logging
from typing import Optional

from fastapi import Depends, Header, Request
from jose import JWTError
from kanban_api.config import Settings
from kanban_api.errors import InvalidToken, Unauthenticated
from kanban_api.schemas.auth import CurrentUser
from kanban_api.utils.auth import decode_token

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return None


def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    tok = _extract_token(authorization)
    if not tok:
        raise Unauthenticated()
    try:
        # jwt.decode validates exp automatically
        payload = decode_token(tok, settings)
    except JWTError as exc:
        logger.info("Rejected token: %s", exc)
        raise InvalidToken()
    try:
        return CurrentUser(id=payload["id"], username=payload["username"], role=payload["role"])
    except (KeyError, ValueError):
        raise InvalidToken()
