import uuid
from typing import Optional

from pydantic import BaseModel


class ProfileOut(BaseModel):
    id: uuid.UUID
    full_name: Optional[str] = None

    class Config:
        from_attributes = True
