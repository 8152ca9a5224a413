import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class VitalCreate(BaseModel):
    blood_pressure_systolic: Optional[int] = None
    blood_pressure_diastolic: Optional[int] = None
    blood_sugar: Optional[float] = None
    weight: Optional[float] = None
    notes: Optional[str] = None


class VitalOut(VitalCreate):
    id: uuid.UUID
    recorded_at: datetime

    class Config:
        from_attributes = True
