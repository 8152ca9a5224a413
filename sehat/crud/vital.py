from sqlalchemy import select
from sqlalchemy.orm import Session

from sehat.core.security import UserContext
from sehat.db.models.vital import Vital
from sehat.schemas.vital import VitalCreate


def create_vital(db: Session, user: UserContext, payload: VitalCreate) -> Vital:
    vital = Vital(
        user_id=user.user_id,
        blood_pressure_systolic=payload.blood_pressure_systolic,
        blood_pressure_diastolic=payload.blood_pressure_diastolic,
        blood_sugar=payload.blood_sugar,
        weight=payload.weight,
        notes=payload.notes or None,
    )
    db.add(vital)
    db.commit()
    db.refresh(vital)
    return vital


def list_vitals(db: Session, user: UserContext, limit: int = 200) -> list[Vital]:
    stmt = (
        select(Vital)
        .where(Vital.user_id == user.user_id)
        .order_by(Vital.recorded_at.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())
