import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from sehat.core.config import settings
from sehat.core.errors import NotFound
from sehat.core.security import UserContext, get_current_user
from sehat.crud import report as report_crud
from sehat.db.session import get_user_db
from sehat.schemas.report import DeleteResp, ReportOut, UploadResp
from sehat.services.analysis_gateway import AnalysisGateway, get_analysis_gateway
from sehat.services.blob_store import LocalBlobStore, get_blob_store
from sehat.services.upload_flow import UploadFlow, analyze_and_record

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_owned_report(db: Session, user: UserContext, report_id: uuid.UUID):
    report = report_crud.get_report(db, user, report_id)
    if report is None:
        # 남의 report 도 404 로 통일
        raise NotFound("Report not found")
    return report


@router.post("", response_model=UploadResp, status_code=201)
def upload_report(
    file: UploadFile = File(...),
    report_date: date | None = Form(None),
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    gateway: AnalysisGateway = Depends(get_analysis_gateway),
):
    flow = UploadFlow(db, user, blob_store, gateway, max_bytes=settings.MAX_UPLOAD_BYTES)

    # 한도 +1 까지만 읽으면 초과 여부는 알 수 있다
    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    flow.select_file(file.filename or "report", file.content_type, data)

    outcome = flow.run(report_date=report_date)
    return UploadResp(
        report=ReportOut.model_validate(outcome.report),
        analyzed=outcome.analyzed,
        message=outcome.message,
    )


@router.get("", response_model=list[ReportOut])
def list_reports(
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
):
    return report_crud.list_reports(db, user)


@router.get("/{report_id}", response_model=ReportOut)
def get_report(
    report_id: uuid.UUID,
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
):
    return _get_owned_report(db, user, report_id)


@router.post("/{report_id}/analyze", response_model=UploadResp)
def reanalyze_report(
    report_id: uuid.UUID,
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
    gateway: AnalysisGateway = Depends(get_analysis_gateway),
):
    report = _get_owned_report(db, user, report_id)
    analyzed, message = analyze_and_record(db, user, report, gateway)
    return UploadResp(report=ReportOut.model_validate(report), analyzed=analyzed, message=message)


@router.delete("/{report_id}", response_model=DeleteResp)
def delete_report(
    report_id: uuid.UUID,
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_user_db),
    blob_store: LocalBlobStore = Depends(get_blob_store),
):
    report = _get_owned_report(db, user, report_id)
    key = blob_store.key_from_url(report.file_url)

    report_crud.delete_report(db, user, report)

    if key:
        try:
            blob_store.delete(key)
        except (OSError, ValueError):
            logger.exception("could not delete blob %s for report %s", key, report_id)

    return DeleteResp(deleted=report_id)
