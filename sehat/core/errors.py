# 클라이언트에 {"error": message} 형태로 내려가는 도메인 예외들
from fastapi import Request
from fastapi.responses import JSONResponse


class SehatError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NotAuthenticated(SehatError):
    status_code = 401
    message = "Not authenticated"


class NotFound(SehatError):
    status_code = 404
    message = "Not found"


class FileValidationError(SehatError):
    status_code = 400
    message = "Invalid file"


class MissingInput(SehatError):
    status_code = 400
    message = "File URL is required"


class StorageError(SehatError):
    status_code = 500
    message = "Upload failed. Dobara try karein."


# --- AI gateway ---
class AnalysisError(SehatError):
    status_code = 500
    message = "Failed to analyze report"


class AnalysisConfigError(AnalysisError):
    message = "AI service not configured"


class AnalysisRateLimited(AnalysisError):
    status_code = 429
    message = "Rate limit exceeded. Thodi der baad dobara try karein."


class AnalysisQuotaExhausted(AnalysisError):
    status_code = 402
    message = "AI credits exhausted. Please contact support."


class AnalysisFailed(AnalysisError):
    pass


class InvalidUpstreamResponse(AnalysisError):
    message = "Invalid AI response"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def sehat_error_handler(request: Request, exc: SehatError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)
