# sehat/db/models/report.py
import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import CheckConstraint, Date, DateTime, Enum, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sehat.db.base import Base


class AnalysisStatus(str, enum.Enum):
    pending = "pending"
    succeeded = "succeeded"
    failed = "failed"


class MedicalReport(Base):
    __tablename__ = "medical_reports"
    __table_args__ = (
        CheckConstraint(
            "(summary_english IS NULL) = (summary_urdu IS NULL)",
            name="ck_medical_reports_summary_pair",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False)
    report_date: Mapped[date] = mapped_column(Date, default=lambda: datetime.now(timezone.utc).date(), nullable=False)

    # 둘 다 null 이거나 둘 다 채워져 있어야 함
    summary_english: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary_urdu: Mapped[str | None] = mapped_column(Text, nullable=True)

    analysis_status: Mapped[AnalysisStatus] = mapped_column(
        Enum(AnalysisStatus, name="analysis_status", native_enum=False, length=20),
        default=AnalysisStatus.pending,
        nullable=False,
    )
    analysis_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
