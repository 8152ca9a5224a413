# 업로드 -> row 저장 -> AI 분석 -> 요약 기록 까지 한 흐름
import enum
import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sehat.core.errors import AnalysisError, FileValidationError, StorageError
from sehat.core.security import UserContext
from sehat.crud import report as report_crud
from sehat.db.models.report import AnalysisStatus, MedicalReport
from sehat.services.analysis_gateway import AnalysisGateway
from sehat.services.blob_store import LocalBlobStore, make_blob_key

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("application/pdf", "image/jpeg", "image/jpg", "image/png")
MAX_FILE_BYTES = 10 * 1024 * 1024

MSG_INVALID_TYPE = "Sirf PDF ya image files upload kar sakte hain (PDF, JPG, PNG)"
MSG_TOO_LARGE = "File size 10MB se kam hona chahiye"
MSG_ANALYZED = "Mubarak ho! Report upload aur analyze ho gayi hai."
MSG_ANALYSIS_PENDING = "Report upload ho gayi lekin analysis pending hai. Dashboard se check karein."


class UploadState(str, enum.Enum):
    idle = "idle"
    file_selected = "file_selected"
    uploading = "uploading"
    persisting = "persisting"
    analyzing = "analyzing"
    done = "done"
    error = "error"


@dataclass
class SelectedFile:
    name: str
    content_type: str
    data: bytes


@dataclass
class UploadOutcome:
    report: MedicalReport
    analyzed: bool
    message: str


def validate_file(content_type: str | None, size: int, max_bytes: int = MAX_FILE_BYTES) -> None:
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise FileValidationError(MSG_INVALID_TYPE)
    if size > max_bytes:
        raise FileValidationError(MSG_TOO_LARGE)


def analyze_and_record(
    db: Session,
    user: UserContext,
    report: MedicalReport,
    gateway: AnalysisGateway,
) -> tuple[bool, str]:
    """
    gateway 호출 결과를 row 에 반영. 분석 실패는 예외로 올리지 않고 (False, 메시지) 로 돌려준다.
    요약이 이미 있는 report 는 다시 분석하지 않는다.
    """
    if report.analysis_status == AnalysisStatus.succeeded:
        return True, MSG_ANALYZED

    try:
        pair = gateway.analyze(report.file_url, report.file_name)
    except AnalysisError as e:
        logger.warning("analysis failed for report %s: %s", report.id, e.message)
        try:
            report_crud.mark_analysis_failed(db, user, report.id, e.message)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("could not record analysis failure for report %s", report.id)
        db.refresh(report)
        return False, f"{MSG_ANALYSIS_PENDING} {e.message}"

    try:
        written = report_crud.set_report_summaries(db, user, report.id, pair)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("could not write summaries for report %s", report.id)
        raise StorageError()

    if not written:
        # 동시에 다른 요청이 먼저 기록한 경우
        logger.info("summaries for report %s were already written", report.id)
    db.refresh(report)
    return True, MSG_ANALYZED


class UploadFlow:
    """
    Idle -> FileSelected -> Uploading -> Persisting -> Analyzing -> Done
    어느 단계에서든 실패하면 Error. 검증 실패는 Idle 에 머문다.
    """

    def __init__(
        self,
        db: Session,
        user: UserContext,
        blob_store: LocalBlobStore,
        gateway: AnalysisGateway,
        max_bytes: int = MAX_FILE_BYTES,
    ):
        self.db = db
        self.user = user
        self.blob_store = blob_store
        self.gateway = gateway
        self.max_bytes = max_bytes
        self.state = UploadState.idle
        self.file: SelectedFile | None = None

    def select_file(self, name: str, content_type: str | None, data: bytes) -> SelectedFile:
        validate_file(content_type, len(data), self.max_bytes)
        self.file = SelectedFile(name=name, content_type=content_type, data=data)
        self.state = UploadState.file_selected
        return self.file

    def run(self, report_date: date | None = None) -> UploadOutcome:
        if self.state != UploadState.file_selected or self.file is None:
            raise RuntimeError(f"cannot upload from state {self.state.value}")
        f = self.file

        self.state = UploadState.uploading
        key = make_blob_key(self.user.user_id, f.name)
        try:
            file_url = self.blob_store.put(key, f.data)
        except (OSError, ValueError):
            self.state = UploadState.error
            logger.exception("blob upload failed: %s", key)
            raise StorageError()

        self.state = UploadState.persisting
        try:
            report = report_crud.create_report(
                self.db,
                self.user,
                file_name=f.name,
                file_url=file_url,
                file_type=f.content_type,
                report_date=report_date,
            )
        except SQLAlchemyError:
            self.db.rollback()
            self.state = UploadState.error
            logger.exception("report insert failed for blob %s", key)
            self.blob_store.delete(key)
            raise StorageError()

        self.state = UploadState.analyzing
        try:
            analyzed, message = analyze_and_record(self.db, self.user, report, self.gateway)
        except StorageError:
            self.state = UploadState.error
            raise

        self.state = UploadState.done
        return UploadOutcome(report=report, analyzed=analyzed, message=message)
