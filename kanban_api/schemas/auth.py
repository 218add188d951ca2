from pydantic import BaseModel
from typing import Optional
from kanban_api.schemas.user import UserOut


class LoginRequest(BaseModel):
    # both optional so a missing field maps to our own 400 message
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserOut


class CurrentUser(BaseModel):
    """Identity decoded from a verified access token."""

    id: int
    username: str
    role: str
