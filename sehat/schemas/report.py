import uuid
from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel

from sehat.db.models.report import AnalysisStatus


class ReportOut(BaseModel):
    id: uuid.UUID
    file_name: str
    file_url: str
    file_type: str
    report_date: date
    summary_english: Optional[str] = None
    summary_urdu: Optional[str] = None
    analysis_status: AnalysisStatus
    analysis_error: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True  # SQLAlchemy ORM -> Pydantic 변환


class UploadResp(BaseModel):
    report: ReportOut
    analyzed: bool
    message: str


class DeleteResp(BaseModel):
    deleted: uuid.UUID


class DashboardOut(BaseModel):
    full_name: str
    reports: List[ReportOut]
