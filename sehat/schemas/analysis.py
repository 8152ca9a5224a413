from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# 프론트가 camelCase 로 보내고 받음
class AnalyzeReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    file_name: Optional[str] = Field(default=None, alias="fileName")


class AnalyzeReportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary_english: str = Field(alias="summaryEnglish")
    summary_urdu: str = Field(alias="summaryUrdu")


class ErrorOut(BaseModel):
    error: str
