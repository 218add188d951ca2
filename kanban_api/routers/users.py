from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from kanban_api.database import get_db
from kanban_api.dependencies import get_current_user
from kanban_api.errors import NotFound
from kanban_api.models.user import User
from kanban_api.schemas.auth import CurrentUser
from kanban_api.schemas.user import UserOut

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).filter(User.is_active.is_(True)).order_by(User.name).all()


@router.get("/me", response_model=UserOut)
def read_me(current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.get(User, current.id)
    if not user:
        raise NotFound("User not found")
    return user
