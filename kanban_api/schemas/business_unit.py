from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional


class BusinessUnitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
