# 모든 함수가 UserContext 를 받아서 user_id 로 범위를 제한한다
import uuid
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from sehat.core.security import UserContext
from sehat.db.models.report import AnalysisStatus, MedicalReport
from sehat.utils.summary_parser import SummaryPair


def create_report(
    db: Session,
    user: UserContext,
    *,
    file_name: str,
    file_url: str,
    file_type: str,
    report_date: date | None = None,
) -> MedicalReport:
    report = MedicalReport(
        user_id=user.user_id,
        file_name=file_name,
        file_url=file_url,
        file_type=file_type,
        analysis_status=AnalysisStatus.pending,
    )
    if report_date is not None:
        report.report_date = report_date
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def get_report(db: Session, user: UserContext, report_id: uuid.UUID) -> MedicalReport | None:
    stmt = select(MedicalReport).where(
        MedicalReport.id == report_id,
        MedicalReport.user_id == user.user_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def list_reports(db: Session, user: UserContext, limit: int = 200) -> list[MedicalReport]:
    stmt = (
        select(MedicalReport)
        .where(MedicalReport.user_id == user.user_id)
        .order_by(MedicalReport.created_at.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def set_report_summaries(db: Session, user: UserContext, report_id: uuid.UUID, pair: SummaryPair) -> bool:
    """
    요약 두 개를 UPDATE 한 번으로 기록. 이미 요약이 있으면 아무것도 안 하고 False.
    """
    stmt = (
        update(MedicalReport)
        .where(
            MedicalReport.id == report_id,
            MedicalReport.user_id == user.user_id,
            MedicalReport.summary_english.is_(None),
        )
        .values(
            summary_english=pair.english,
            summary_urdu=pair.roman_urdu,
            analysis_status=AnalysisStatus.succeeded,
            analysis_error=None,
        )
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount == 1


def mark_analysis_failed(db: Session, user: UserContext, report_id: uuid.UUID, reason: str) -> None:
    # 요약은 null 그대로 둔다
    stmt = (
        update(MedicalReport)
        .where(
            MedicalReport.id == report_id,
            MedicalReport.user_id == user.user_id,
            MedicalReport.summary_english.is_(None),
        )
        .values(analysis_status=AnalysisStatus.failed, analysis_error=reason)
    )
    db.execute(stmt)
    db.commit()


def delete_report(db: Session, user: UserContext, report: MedicalReport) -> None:
    if report.user_id != user.user_id:
        raise ValueError("report does not belong to user")
    db.delete(report)
    db.commit()
