# sehat/db/models/profile.py
import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sehat.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    # auth 서비스의 user id 와 같은 값
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
