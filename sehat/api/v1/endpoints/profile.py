from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sehat.core.errors import NotFound
from sehat.core.security import UserContext, get_current_user
from sehat.crud import profile as profile_crud
from sehat.crud import report as report_crud
from sehat.db.session import get_user_db
from sehat.schemas.profile import ProfileOut
from sehat.schemas.report import DashboardOut, ReportOut

router = APIRouter()


@router.get("/profile", response_model=ProfileOut)
def get_profile(
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
):
    profile = profile_crud.get_profile(db, user)
    if profile is None:
        raise NotFound("Profile not found")
    return profile


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
):
    profile = profile_crud.get_profile(db, user)
    reports = report_crud.list_reports(db, user)
    return DashboardOut(
        full_name=(profile.full_name if profile else None) or "User",
        reports=[ReportOut.model_validate(r) for r in reports],
    )
