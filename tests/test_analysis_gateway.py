import httpx
import openai
import pytest

from sehat.core.errors import (
    AnalysisConfigError,
    AnalysisFailed,
    AnalysisQuotaExhausted,
    AnalysisRateLimited,
    InvalidUpstreamResponse,
    MissingInput,
)
from sehat.services.analysis_gateway import MEDICAL_REPORT_SYSTEM_PROMPT, build_messages
from sehat.utils.summary_parser import FALLBACK_URDU, SummaryPair

from conftest import make_gateway

FILE_URL = "https://files.test/u1/1700000000000.pdf"
REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")


def _status_error(status_code):
    response = httpx.Response(status_code, request=REQUEST, json={"error": "nope"})
    if status_code == 429:
        return openai.RateLimitError("rate limited", response=response, body=None)
    return openai.APIStatusError("upstream error", response=response, body=None)


def test_builds_multimodal_request():
    gateway, client = make_gateway()
    gateway.analyze(FILE_URL, "cbc.pdf")

    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["model"] == "test-model"
    system, user = call["messages"]
    assert system == {"role": "system", "content": MEDICAL_REPORT_SYSTEM_PROMPT}
    assert user["role"] == "user"
    text_part, image_part = user["content"]
    assert text_part["type"] == "text"
    assert "cbc.pdf" in text_part["text"]
    assert image_part == {"type": "image_url", "image_url": {"url": FILE_URL}}


def test_system_prompt_demands_json_only():
    assert '"english"' in MEDICAL_REPORT_SYSTEM_PROMPT
    assert '"romanUrdu"' in MEDICAL_REPORT_SYSTEM_PROMPT
    assert "Do not add any text outside the JSON object" in MEDICAL_REPORT_SYSTEM_PROMPT
    assert build_messages(FILE_URL, "x.png")[1]["content"][1]["image_url"]["url"] == FILE_URL


def test_returns_parsed_pair():
    gateway, _ = make_gateway(content='{"english":"A","romanUrdu":"B"}')
    assert gateway.analyze(FILE_URL, "cbc.pdf") == SummaryPair(english="A", roman_urdu="B")


def test_unparseable_content_is_not_an_error():
    gateway, _ = make_gateway(content="The patient is healthy.")
    pair = gateway.analyze(FILE_URL, "cbc.pdf")
    assert pair == SummaryPair(english="The patient is healthy.", roman_urdu=FALLBACK_URDU)


@pytest.mark.parametrize("file_url, file_name", [(None, "a.pdf"), ("", "a.pdf"), (FILE_URL, None), (FILE_URL, "")])
def test_missing_input_rejected_before_network(file_url, file_name):
    gateway, client = make_gateway()
    with pytest.raises(MissingInput):
        gateway.analyze(file_url, file_name)
    assert client.calls == []


def test_missing_api_key_is_config_error_before_network():
    gateway, client = make_gateway(api_key=None)
    with pytest.raises(AnalysisConfigError) as exc:
        gateway.analyze(FILE_URL, "cbc.pdf")
    assert exc.value.status_code == 500
    assert client.calls == []


def test_rate_limit_maps_to_429():
    gateway, client = make_gateway(error=_status_error(429))
    with pytest.raises(AnalysisRateLimited) as exc:
        gateway.analyze(FILE_URL, "cbc.pdf")
    assert exc.value.status_code == 429
    # 재시도 없음
    assert len(client.calls) == 1


def test_payment_required_maps_to_quota_exhausted():
    gateway, _ = make_gateway(error=_status_error(402))
    with pytest.raises(AnalysisQuotaExhausted) as exc:
        gateway.analyze(FILE_URL, "cbc.pdf")
    assert exc.value.status_code == 402


@pytest.mark.parametrize("status_code", [400, 401, 500, 503])
def test_other_statuses_are_generic_failure(status_code):
    gateway, _ = make_gateway(error=_status_error(status_code))
    with pytest.raises(AnalysisFailed) as exc:
        gateway.analyze(FILE_URL, "cbc.pdf")
    assert exc.value.status_code == 500
    assert exc.value.message == "Failed to analyze report"


@pytest.mark.parametrize(
    "error",
    [openai.APIConnectionError(request=REQUEST), openai.APITimeoutError(request=REQUEST)],
)
def test_transport_failure_is_generic_failure(error):
    gateway, _ = make_gateway(error=error)
    with pytest.raises(AnalysisFailed):
        gateway.analyze(FILE_URL, "cbc.pdf")


@pytest.mark.parametrize("content", [None, ""])
def test_empty_content_is_invalid_upstream_response(content):
    gateway, _ = make_gateway(content=content)
    with pytest.raises(InvalidUpstreamResponse) as exc:
        gateway.analyze(FILE_URL, "cbc.pdf")
    assert exc.value.message == "Invalid AI response"


def test_no_choices_is_invalid_upstream_response():
    gateway, client = make_gateway()
    client.completions.create = lambda **kw: type("Completion", (), {"choices": []})()
    with pytest.raises(InvalidUpstreamResponse):
        gateway.analyze(FILE_URL, "cbc.pdf")
