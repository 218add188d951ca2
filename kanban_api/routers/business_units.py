from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from kanban_api.database import get_db
from kanban_api.dependencies import get_current_user
from kanban_api.models.business_unit import BusinessUnit
from kanban_api.schemas.business_unit import BusinessUnitOut

router = APIRouter(prefix="/api/business-units", tags=["business-units"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[BusinessUnitOut])
def list_business_units(db: Session = Depends(get_db)):
    return db.query(BusinessUnit).order_by(BusinessUnit.name).all()
