import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from sehat.api.v1.router import router as v1_router
from sehat.core.config import settings
from sehat.core.errors import SehatError, error_response, sehat_error_handler
from sehat.core.logging_config import setup_logging

# DB 관련 import (Base / engine)
from sehat.db.base import Base
from sehat.db.session import engine

# 모델들을 등록하기 위해 import (Base.metadata에 모델이 올라가도록)
import sehat.db.models  # noqa: F401

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("sehat.main")

BLOB_DIR = Path(settings.BLOB_STORAGE_DIR)
BLOB_DIR.mkdir(parents=True, exist_ok=True)

app = FastAPI(title="Sehat Records")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

app.add_exception_handler(SehatError, sehat_error_handler)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return error_response(400, f"{field}: {message}" if field else message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


app.include_router(v1_router, prefix="/api/v1")

# 업로드된 파일 공개 URL (AI gateway 가 여기서 파일을 가져감)
app.mount("/files", StaticFiles(directory=str(BLOB_DIR)), name="files")


@app.on_event("startup")
def on_startup():
    # 개발 단계 편의용: 테이블 자동 생성 (운영은 alembic)
    Base.metadata.create_all(bind=engine)


# 연결 체크
@app.get("/health")
def health():
    return {"ok": True}
