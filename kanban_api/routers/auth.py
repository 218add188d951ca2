import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from kanban_api.config import Settings
from kanban_api.database import get_db
from kanban_api.dependencies import get_settings
from kanban_api.errors import BadRequest, InvalidCredentials
from kanban_api.models.user import User
from kanban_api.schemas.auth import LoginRequest, LoginResponse
from kanban_api.schemas.user import UserOut
from kanban_api.utils.auth import burn_password_check, create_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    if not credentials.username or not credentials.password:
        raise BadRequest("Username and password required")

    username = credentials.username.strip().lower()
    db_user = (
        db.query(User)
        .filter(User.username == username, User.is_active.is_(True))
        .first()
    )
    if not db_user:
        burn_password_check(credentials.password)
        logger.info("Login failed for %r", username)
        raise InvalidCredentials()
    if not verify_password(credentials.password, db_user.password_hash):
        logger.info("Login failed for %r", username)
        raise InvalidCredentials()

    token = create_token({"id": db_user.id, "username": db_user.username, "role": db_user.role}, settings)
    logger.info("User %s logged in", db_user.id)
    return {"message": "Login successful", "token": token, "user": UserOut.model_validate(db_user)}
