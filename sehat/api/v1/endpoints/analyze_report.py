# 외부에서 직접 호출하는 분석 함수: {fileUrl, fileName} -> {summaryEnglish, summaryUrdu}
from fastapi import APIRouter, Depends, Response

from sehat.core.security import UserContext, get_current_user
from sehat.schemas.analysis import AnalyzeReportRequest, AnalyzeReportResponse, ErrorOut
from sehat.services.analysis_gateway import AnalysisGateway, get_analysis_gateway

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


@router.options("/analyze-report")
def analyze_report_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/analyze-report",
    response_model=AnalyzeReportResponse,
    responses={
        400: {"model": ErrorOut},
        402: {"model": ErrorOut},
        429: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
def analyze_report(
    payload: AnalyzeReportRequest,
    response: Response,
    user: UserContext = Depends(get_current_user),
    gateway: AnalysisGateway = Depends(get_analysis_gateway),
):
    pair = gateway.analyze(payload.file_url, payload.file_name)
    response.headers.update(CORS_HEADERS)
    return AnalyzeReportResponse(summary_english=pair.english, summary_urdu=pair.roman_urdu)
