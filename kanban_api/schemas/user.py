from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional


class UserOut(BaseModel):
    """Public profile; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    role: str
    business_unit: Optional[str] = None
    is_active: bool
    created_at: datetime
