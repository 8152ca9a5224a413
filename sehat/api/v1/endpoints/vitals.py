from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sehat.core.security import UserContext, get_current_user
from sehat.crud import vital as vital_crud
from sehat.db.session import get_user_db
from sehat.schemas.vital import VitalCreate, VitalOut

router = APIRouter()


@router.post("", response_model=VitalOut, status_code=201)
def record_vital(
    payload: VitalCreate,
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
):
    return vital_crud.create_vital(db, user, payload)


@router.get("", response_model=list[VitalOut])
def list_vitals(
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
):
    return vital_crud.list_vitals(db, user)
