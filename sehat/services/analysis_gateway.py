import logging

import openai
from openai import OpenAI

from sehat.core.config import settings
from sehat.core.errors import (
    AnalysisConfigError,
    AnalysisFailed,
    AnalysisQuotaExhausted,
    AnalysisRateLimited,
    InvalidUpstreamResponse,
    MissingInput,
)
from sehat.utils.summary_parser import SummaryPair, extract_summary_pair

logger = logging.getLogger(__name__)

MEDICAL_REPORT_SYSTEM_PROMPT = """
You are a medical report analyzer. Analyze medical reports and provide clear, bilingual summaries.

CRITICAL: Respond ONLY with valid JSON in this exact format:
{
  "english": "Clear, concise summary of key findings, test results, and recommendations",
  "romanUrdu": "Roman Urdu me medical report ka mukhtasir bayaan. Test results aur zaroori baatain shamil karein"
}

Rules:
- Keep summaries factual and clear
- Highlight abnormal values
- Use simple medical terminology
- Roman Urdu should be easy to read (e.g., "Blood pressure zyada hai" not complex medical terms)
- Do not add any text outside the JSON object
""".strip()


def build_messages(file_url: str, file_name: str) -> list[dict]:
    return [
        {"role": "system", "content": MEDICAL_REPORT_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": f"Analyze this medical report: {file_name}\n"
                            "Provide bilingual summary (English and Roman Urdu).",
                },
                {"type": "image_url", "image_url": {"url": file_url}},
            ],
        },
    ]


class AnalysisGateway:
    """
    업로드된 파일 URL 하나 -> 영어 / Roman Urdu 요약 한 쌍.

    호출은 한 번만 한다 (SDK 재시도 끔). 응답 파싱 실패는 예외가 아니라
    fallback 요약으로 처리되고, 호출자에게 올라가는 건 설정/전송/상태코드 오류뿐이다.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        model: str,
        timeout: float | None = None,
        client: OpenAI | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def _request(self, file_url: str, file_name: str) -> str:
        try:
            completion = self._get_client().chat.completions.create(
                model=self.model,
                messages=build_messages(file_url, file_name),
            )
        except openai.APIStatusError as e:
            logger.error("AI gateway error: status=%s body=%s", e.status_code, e.body)
            if e.status_code == 429:
                raise AnalysisRateLimited()
            if e.status_code == 402:
                raise AnalysisQuotaExhausted()
            raise AnalysisFailed()
        except openai.APIConnectionError as e:
            # timeout 포함
            logger.error("AI gateway unreachable: %s", e)
            raise AnalysisFailed()

        choices = getattr(completion, "choices", None) or []
        content = choices[0].message.content if choices and choices[0].message else None
        if not content:
            logger.error("No content in AI response")
            raise InvalidUpstreamResponse()
        return content

    def analyze(self, file_url: str | None, file_name: str | None) -> SummaryPair:
        if not file_url:
            raise MissingInput("File URL is required")
        if not file_name:
            raise MissingInput("File name is required")
        if not self.api_key:
            logger.error("AI_GATEWAY_API_KEY not configured")
            raise AnalysisConfigError()

        logger.info("Analyzing medical report: %s", file_name)
        content = self._request(file_url, file_name)
        pair = extract_summary_pair(content)
        logger.info("Analysis complete: %s", file_name)
        return pair


def get_analysis_gateway() -> AnalysisGateway:
    return AnalysisGateway(
        api_key=settings.AI_GATEWAY_API_KEY,
        base_url=settings.AI_GATEWAY_BASE_URL,
        model=settings.AI_MODEL,
        timeout=settings.ANALYSIS_TIMEOUT_SECONDS,
    )
